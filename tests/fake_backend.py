"""In-process stand-in for the backend process.

``FakeTransport`` answers requests from a table of scripted handlers and can
push events; ``connect`` wires it through the real client and typed API.
"""

from __future__ import annotations

import queue
from typing import Any, Callable

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.client import BridgeClient
from mod_deck.bridge.errors import BridgeClosed


class Reject(Exception):
    """Raised by a handler to make the fake answer ``ok: false``."""

    def __init__(self, error: Any) -> None:
        super().__init__(str(error))
        self.error = error


Handler = Callable[[dict], Any]


class FakeTransport:
    def __init__(self, handlers: dict[str, Any] | None = None) -> None:
        self.handlers: dict[str, Any] = dict(handlers or {})
        self.calls: list[tuple[str, dict]] = []
        self.held: list[dict] = []
        self.hold_replies = False
        self.opened = False
        self.closed = False
        self._inbox: queue.Queue[dict | None] = queue.Queue()

    # -- Transport ----------------------------------------------------------

    def open(self) -> None:
        self.opened = True

    def send(self, message: dict) -> None:
        if self.closed:
            raise BridgeClosed("fake transport closed")
        self.calls.append((message["command"], dict(message.get("args") or {})))
        if self.hold_replies:
            self.held.append(message)
            return
        self._inbox.put(self._reply(message))

    def receive(self) -> dict | None:
        return self._inbox.get()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._inbox.put(None)

    # -- scripting ----------------------------------------------------------

    def _reply(self, message: dict) -> dict:
        command = message["command"]
        request_id = message["id"]
        if command not in self.handlers:
            return {"id": request_id, "ok": False, "error": f"unknown command {command}"}
        handler = self.handlers[command]
        try:
            result = handler(message.get("args") or {}) if callable(handler) else handler
        except Reject as exc:
            return {"id": request_id, "ok": False, "error": exc.error}
        return {"id": request_id, "ok": True, "result": result}

    def release_held(self) -> None:
        held, self.held = self.held, []
        for message in held:
            self._inbox.put(self._reply(message))

    def emit(self, channel: str, payload: Any = None, operation: str | None = None) -> None:
        event: dict[str, Any] = {"event": channel, "payload": payload}
        if operation is not None:
            event["operation"] = operation
        self._inbox.put(event)

    def inject(self, message: dict) -> None:
        self._inbox.put(message)

    def commands(self) -> list[str]:
        return [command for command, _args in self.calls]

    def last_args(self, command: str) -> dict:
        for name, args in reversed(self.calls):
            if name == command:
                return args
        raise AssertionError(f"{command} was never called")


def rejecting(error: Any) -> Handler:
    def _handler(_args: dict) -> Any:
        raise Reject(error)

    return _handler


def connect(handlers: dict[str, Any] | None = None) -> tuple[ModBackend, FakeTransport]:
    transport = FakeTransport(handlers)
    client = BridgeClient(transport, call_timeout=2.0)
    client.start()
    return ModBackend(client), transport


def asset_row(
    asset_id: int,
    name: str,
    enabled: bool = True,
    folder: str | None = None,
    **extra: Any,
) -> dict:
    folder = folder if folder is not None else name.replace(" ", "")
    if not enabled and not folder.rpartition("/")[2].startswith("DISABLED_"):
        parent, sep, leaf = folder.rpartition("/")
        folder = f"{parent}{sep}DISABLED_{leaf}"
    row = {
        "id": asset_id,
        "entity_id": 1,
        "name": name,
        "folder_name": folder,
        "is_enabled": enabled,
    }
    row.update(extra)
    return row


def entity_row(entity_id: int, name: str, slug: str | None = None, **extra: Any) -> dict:
    row = {
        "id": entity_id,
        "category_id": 1,
        "name": name,
        "slug": slug or name.lower().replace(" ", "-"),
        "mod_count": 0,
    }
    row.update(extra)
    return row
