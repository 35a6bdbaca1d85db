"""Length-prefixed JSON framing shared by every transport.

Wire format: 4-byte little-endian uint32 length, then that many bytes of
UTF-8 JSON encoding one object. Replies and events use the same framing.
"""

from __future__ import annotations

import json
import struct
from typing import BinaryIO, Callable

from mod_deck.bridge.errors import ProtocolError


HEADER = struct.Struct("<I")
MAX_FRAME_BYTES = 64 * 1024 * 1024


def encode_frame(message: dict) -> bytes:
    payload = json.dumps(message, separators=(",", ":")).encode("utf-8")
    if len(payload) > MAX_FRAME_BYTES:
        raise ProtocolError(f"Frame of {len(payload)} bytes exceeds limit")
    return HEADER.pack(len(payload)) + payload


def decode_payload(payload: bytes) -> dict:
    try:
        message = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError(f"Invalid JSON frame: {exc}") from exc
    if not isinstance(message, dict):
        raise ProtocolError("Frame must contain a JSON object")
    return message


def read_frame(read_exact: Callable[[int], bytes | None]) -> dict | None:
    """Read one message using ``read_exact(n)``.

    ``read_exact`` returns exactly ``n`` bytes, or None/short data at EOF.
    Returns None on a clean EOF between frames.
    """
    header = read_exact(HEADER.size)
    if not header:
        return None
    if len(header) != HEADER.size:
        raise ProtocolError("Truncated frame header")
    (length,) = HEADER.unpack(header)
    if length > MAX_FRAME_BYTES:
        raise ProtocolError(f"Frame of {length} bytes exceeds limit")
    payload = read_exact(length) if length else b""
    if payload is None or len(payload) != length:
        raise ProtocolError("Truncated frame body")
    return decode_payload(payload)


def stream_reader(stream: BinaryIO) -> Callable[[int], bytes]:
    """Adapt a blocking binary stream into a ``read_exact`` callable."""

    def read_exact(n: int) -> bytes:
        chunks: list[bytes] = []
        remaining = n
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    return read_exact
