"""Command/event bridge client.

Requests are correlated with replies by a monotonically increasing id; a
background reader thread resolves pending calls and publishes events.
Callers block in ``call`` until their reply arrives, which keeps controller
code sequential while events keep flowing.
"""

from __future__ import annotations

from concurrent.futures import Future, TimeoutError as FutureTimeout
import itertools
import logging
import threading
from typing import Any, Callable

from mod_deck.bridge.errors import (
    BackendError,
    BridgeClosed,
    CommandRejected,
    CommandTimeout,
    ProtocolError,
    rejection_from_payload,
)
from mod_deck.bridge.events import Event, EventBus, OperationHandle, OperationTracker
from mod_deck.bridge.transport import Transport
from mod_deck.models.constants import PRESET_APPLY_EVENTS, SCAN_EVENTS, EventFamily


logger = logging.getLogger(__name__)

TRACKED_FAMILIES = (SCAN_EVENTS, PRESET_APPLY_EVENTS)

# Marker for "use the client's call_timeout"; None means wait without limit.
DEFAULT_TIMEOUT = object()


class BridgeClient:
    """One connection to the backend, shared by every controller."""

    def __init__(
        self,
        transport: Transport,
        *,
        call_timeout: float | None = None,
        families: tuple[EventFamily, ...] = TRACKED_FAMILIES,
    ) -> None:
        self._transport = transport
        self.call_timeout = call_timeout
        self.events = EventBus()
        self.operations = OperationTracker(self.events, families)
        self._ids = itertools.count(1)
        self._pending: dict[int, tuple[str, Future]] = {}
        self._lock = threading.Lock()
        self._reader: threading.Thread | None = None
        self._closed = False
        self._on_close: list[Callable[[str], None]] = []

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        self._transport.open()
        self._reader = threading.Thread(target=self._read_loop, name="mod-deck-bridge", daemon=True)
        self._reader.start()

    def close(self) -> None:
        if self._closed:
            return
        self._transport.close()
        if self._reader is not None and self._reader is not threading.current_thread():
            self._reader.join(timeout=2)
        self._shutdown("Backend connection closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def on_close(self, callback: Callable[[str], None]) -> None:
        self._on_close.append(callback)

    def __enter__(self) -> BridgeClient:
        self.start()
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    # -- commands -----------------------------------------------------------

    def submit(self, command: str, args: dict | None = None) -> Future:
        """Send ``command`` without waiting; the returned Future resolves with its reply."""
        _request_id, future = self._send(command, args)
        return future

    def call(
        self,
        command: str,
        args: dict | None = None,
        *,
        timeout: float | None | object = DEFAULT_TIMEOUT,
    ) -> Any:
        """Invoke ``command`` and return its result, or raise a ``BackendError``.

        ``timeout`` defaults to the client's ``call_timeout``; pass ``None`` to
        wait until the backend replies or the connection closes.
        """
        request_id, future = self._send(command, args)
        wait = self.call_timeout if timeout is DEFAULT_TIMEOUT else timeout
        try:
            return future.result(timeout=wait)
        except FutureTimeout:
            with self._lock:
                self._pending.pop(request_id, None)
            raise CommandTimeout(command, wait or 0.0) from None
        except BackendError as exc:
            logger.warning("Command %s failed: %s", command, exc)
            raise

    def _send(self, command: str, args: dict | None) -> tuple[int, Future]:
        if self._closed:
            raise BridgeClosed("Backend connection closed")
        request_id = next(self._ids)
        future: Future = Future()
        with self._lock:
            self._pending[request_id] = (command, future)
        message = {"id": request_id, "command": command, "args": args or {}}
        logger.debug("-> %s #%d", command, request_id)
        try:
            self._transport.send(message)
        except BackendError:
            with self._lock:
                self._pending.pop(request_id, None)
            raise
        return request_id, future

    def start_operation(
        self,
        family: EventFamily,
        command: str,
        args: dict | None = None,
    ) -> OperationHandle:
        """Fire a long-running command and return its tracking handle at once.

        The start reply is not awaited and no call timeout applies; only the
        family's complete or error event ends the handle. A backend rejection
        of the start command fails and releases the handle when it arrives.
        Raises ``OperationInProgress`` when the family is busy.
        """
        handle = self.operations.begin(family)
        payload = dict(args or {})
        payload["operationId"] = handle.token
        try:
            future = self.submit(command, payload)
        except BackendError as exc:
            self.operations.fail(handle, str(exc))
            raise

        def _on_reply(done: Future) -> None:
            exc = done.exception()
            if isinstance(exc, CommandRejected):
                logger.warning("Command %s was rejected: %s", command, exc)
                self.operations.fail(handle, str(exc))

        future.add_done_callback(_on_reply)
        return handle

    # -- reader -------------------------------------------------------------

    def _read_loop(self) -> None:
        reason = "Backend connection closed"
        while True:
            try:
                message = self._transport.receive()
            except ProtocolError as exc:
                logger.error("Backend sent an unreadable frame: %s", exc)
                reason = f"Protocol error: {exc}"
                break
            except OSError as exc:
                reason = f"Backend connection lost: {exc}"
                break
            if message is None:
                break
            self._dispatch(message)
        self._shutdown(reason)

    def _dispatch(self, message: dict) -> None:
        if "event" in message:
            self.events.publish(
                Event(
                    channel=str(message["event"]),
                    payload=message.get("payload"),
                    operation=message.get("operation"),
                )
            )
            return

        request_id = message.get("id")
        with self._lock:
            entry = self._pending.pop(request_id, None)
        if entry is None:
            logger.debug("Reply for unknown request %r", request_id)
            return
        command, future = entry
        if message.get("ok", False):
            future.set_result(message.get("result"))
        else:
            future.set_exception(rejection_from_payload(command, message.get("error")))

    def _shutdown(self, reason: str) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._pending.values())
            self._pending.clear()
        for command, future in pending:
            if not future.done():
                future.set_exception(BridgeClosed(f"{reason} while waiting for {command}"))
        self.operations.fail_all(reason)
        logger.info("Bridge shut down: %s", reason)
        for callback in list(self._on_close):
            callback(reason)
