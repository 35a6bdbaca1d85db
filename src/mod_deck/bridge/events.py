"""Event channels and per-invocation handles for long-running operations.

The backend reports long operations (mod scans, preset application) on four
named channels per family: start, progress, complete, error. Each invocation
gets an ``OperationHandle`` keyed by a token the backend echoes back as the
event's ``operation`` field. Events without a token belong to the family's
single outstanding operation; starting a second one of the same family is
refused until the first one terminates.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import Any, Callable, Iterator, Literal
import uuid

from mod_deck.bridge.errors import OperationFailed, OperationInProgress
from mod_deck.models.constants import EventFamily
from mod_deck.models.progress import ProgressUpdate


logger = logging.getLogger(__name__)

UpdateKind = Literal["start", "progress", "complete", "error"]


@dataclass(frozen=True, slots=True)
class Event:
    channel: str
    payload: Any = None
    operation: str | None = None


class Subscription:
    """Handle returned by ``EventBus.subscribe``; call ``unsubscribe`` to stop."""

    __slots__ = ("channel", "callback", "_bus")

    def __init__(self, bus: EventBus, channel: str, callback: Callable[[Event], None]) -> None:
        self._bus: EventBus | None = bus
        self.channel = channel
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._bus is not None

    def unsubscribe(self) -> None:
        bus, self._bus = self._bus, None
        if bus is not None:
            bus._remove(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *_exc) -> None:
        self.unsubscribe()


class EventBus:
    """Thread-safe fan-out of named events to subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subs: dict[str, list[Subscription]] = {}

    def subscribe(self, channel: str, callback: Callable[[Event], None]) -> Subscription:
        sub = Subscription(self, channel, callback)
        with self._lock:
            self._subs.setdefault(channel, []).append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subs.get(sub.channel)
            if subs and sub in subs:
                subs.remove(sub)
                if not subs:
                    del self._subs[sub.channel]

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._subs.get(channel, ()))

    def publish(self, event: Event) -> None:
        with self._lock:
            subs = list(self._subs.get(event.channel, ()))
        logger.debug("Event %s (operation=%s) -> %d subscriber(s)", event.channel, event.operation, len(subs))
        for sub in subs:
            try:
                sub.callback(event)
            except Exception:
                # A broken listener must not stop delivery to the others.
                logger.exception("Event listener for %s failed", event.channel)


@dataclass(frozen=True, slots=True)
class OperationUpdate:
    kind: UpdateKind
    progress: ProgressUpdate | None = None
    message: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.kind in ("complete", "error")


class OperationHandle:
    """One invocation of a tracked backend operation."""

    def __init__(self, family: EventFamily, token: str | None = None) -> None:
        self.family = family
        self.token = token or uuid.uuid4().hex
        self._cond = threading.Condition()
        # Held while invoking listeners so replay and live delivery never interleave.
        self._delivery = threading.RLock()
        self._updates: list[OperationUpdate] = []
        self._listeners: list[Callable[[OperationUpdate], None]] = []
        self._detached = False
        self.latest: ProgressUpdate | None = None
        self.summary: str | None = None
        self.error: str | None = None

    def __repr__(self) -> str:
        return f"OperationHandle({self.family.name!r}, token={self.token!r}, state={self.state!r})"

    @property
    def state(self) -> str:
        if self.summary is not None:
            return "complete"
        if self.error is not None:
            return "failed"
        if self.latest is not None:
            return "running"
        return "pending"

    def done(self) -> bool:
        return self.summary is not None or self.error is not None

    def add_listener(self, callback: Callable[[OperationUpdate], None]) -> None:
        """Register a callback; updates already seen are replayed first."""
        with self._delivery:
            with self._cond:
                seen = list(self._updates)
                self._listeners.append(callback)
            for update in seen:
                callback(update)

    def detach(self) -> None:
        """Stop local delivery. The backend keeps working; there is no cancel."""
        with self._cond:
            self._detached = True
            self._listeners.clear()

    def result(self, timeout: float | None = None) -> str:
        with self._cond:
            if not self._cond.wait_for(self.done, timeout=timeout):
                raise TimeoutError(f"{self.family.name} operation still running")
        if self.error is not None:
            raise OperationFailed(self.family.name, self.error)
        return self.summary or ""

    def updates(self, timeout: float | None = None) -> Iterator[OperationUpdate]:
        """Yield updates in arrival order until the terminal one."""
        index = 0
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._cond:
                while index >= len(self._updates):
                    remaining = None if deadline is None else deadline - time.monotonic()
                    if remaining is not None and remaining <= 0:
                        raise TimeoutError(f"{self.family.name} operation still running")
                    self._cond.wait(remaining)
                update = self._updates[index]
            index += 1
            yield update
            if update.is_terminal:
                return

    def _apply(self, kind: UpdateKind, payload: Any) -> None:
        if self.done():
            logger.debug("Ignoring %s event for finished %r", kind, self)
            return
        if kind == "start":
            total = payload if isinstance(payload, int) else 0
            update = OperationUpdate("start", ProgressUpdate.starting(total))
        elif kind == "progress":
            update = OperationUpdate("progress", ProgressUpdate.from_json(payload))
        elif kind == "complete":
            update = OperationUpdate("complete", message=str(payload or "Completed."))
        else:
            update = OperationUpdate("error", message=str(payload or "An unknown error occurred."))
        self._record(update)

    def _fail(self, message: str) -> None:
        if not self.done():
            self._record(OperationUpdate("error", message=message))

    def _record(self, update: OperationUpdate) -> None:
        with self._cond:
            if update.progress is not None:
                self.latest = update.progress
            if update.kind == "complete":
                self.summary = update.message
            elif update.kind == "error":
                self.error = update.message
            self._updates.append(update)
            listeners = [] if self._detached else list(self._listeners)
            self._cond.notify_all()
        with self._delivery:
            for callback in listeners:
                try:
                    callback(update)
                except Exception:
                    logger.exception("Operation listener for %r failed", self)


class OperationTracker:
    """Routes family events to the matching outstanding handle."""

    def __init__(self, bus: EventBus, families: tuple[EventFamily, ...]) -> None:
        self._lock = threading.Lock()
        self._active: dict[str, OperationHandle] = {}
        self._routes: dict[str, tuple[EventFamily, UpdateKind]] = {}
        self._subs: list[Subscription] = []
        for family in families:
            for channel, kind in zip(family.channels, ("start", "progress", "complete", "error")):
                self._routes[channel] = (family, kind)
                self._subs.append(bus.subscribe(channel, self._on_event))

    def begin(self, family: EventFamily) -> OperationHandle:
        with self._lock:
            current = self._active.get(family.name)
            if current is not None and not current.done():
                raise OperationInProgress(family.name)
            handle = OperationHandle(family)
            self._active[family.name] = handle
        logger.debug("Began %r", handle)
        return handle

    def active(self, family: EventFamily) -> OperationHandle | None:
        with self._lock:
            return self._active.get(family.name)

    def fail(self, handle: OperationHandle, message: str) -> None:
        self._release(handle)
        handle._fail(message)

    def fail_all(self, message: str) -> None:
        with self._lock:
            handles = list(self._active.values())
            self._active.clear()
        for handle in handles:
            handle._fail(message)

    def close(self) -> None:
        for sub in self._subs:
            sub.unsubscribe()
        self._subs.clear()

    def _release(self, handle: OperationHandle) -> None:
        with self._lock:
            if self._active.get(handle.family.name) is handle:
                del self._active[handle.family.name]

    def _on_event(self, event: Event) -> None:
        route = self._routes.get(event.channel)
        if route is None:
            return
        family, kind = route
        with self._lock:
            handle = self._active.get(family.name)
        if handle is None:
            logger.debug("Dropping %s event with no outstanding operation", event.channel)
            return
        if event.operation is not None and event.operation != handle.token:
            logger.debug("Dropping stale %s event for operation %s", event.channel, event.operation)
            return
        # Released before waiters wake so a follow-up start is accepted.
        if kind in ("complete", "error"):
            self._release(handle)
        handle._apply(kind, event.payload)
