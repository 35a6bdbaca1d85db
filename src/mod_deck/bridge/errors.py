"""Error taxonomy for the backend bridge.

Backend rejections arrive as bare strings or ``{"message": ...}`` objects;
``rejection_from_payload`` normalises both and picks the most specific
subclass from the message text.
"""

from __future__ import annotations


class BackendError(Exception):
    """Base class for every failure surfaced by the bridge."""


class CommandRejected(BackendError):
    """The backend ran the command and reported an error."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(message)
        self.command = command
        self.message = message


class NotFound(CommandRejected):
    """A rejection whose message says something was not found."""


class ElevationRequired(CommandRejected):
    """The OS refused to launch a program without administrator rights."""


class BridgeError(BackendError):
    """The connection to the backend misbehaved."""


class BridgeClosed(BridgeError):
    pass


class CommandTimeout(BridgeError):
    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(f"Command {command!r} timed out after {timeout:g}s")
        self.command = command
        self.timeout = timeout


class ProtocolError(BridgeError):
    """A frame or message could not be decoded."""


class OperationError(BackendError):
    """Base class for tracked long-running operation failures."""


class OperationInProgress(OperationError):
    def __init__(self, family: str) -> None:
        super().__init__(f"A {family} operation is already running")
        self.family = family


class OperationFailed(OperationError):
    def __init__(self, family: str, message: str) -> None:
        super().__init__(message)
        self.family = family
        self.message = message


_ELEVATION_MARKERS = ("os error 740", "requires administrator privileges")


def error_message(payload) -> str:
    """Turn a backend error payload into display text."""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        message = payload.get("message")
        if message:
            return str(message)
    if payload is None:
        return "Unknown error"
    return str(payload)


def rejection_from_payload(command: str, payload) -> CommandRejected:
    message = error_message(payload)
    lowered = message.lower()
    if any(marker in lowered for marker in _ELEVATION_MARKERS):
        return ElevationRequired(command, message)
    if "not found" in lowered:
        return NotFound(command, message)
    return CommandRejected(command, message)
