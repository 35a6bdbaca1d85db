"""Byte transports that carry framed messages to and from the backend.

One instance = one persistent connection. ``send`` may be called from any
thread (the client serialises writes); ``receive`` is only called from the
client's reader thread.
"""

from __future__ import annotations

import logging
import socket
import subprocess
import threading
import time
from typing import Protocol

from mod_deck.bridge.errors import BridgeClosed
from mod_deck.bridge.wire import encode_frame, read_frame, stream_reader


logger = logging.getLogger(__name__)

TCP_SCHEME = "tcp://"


class Transport(Protocol):
    def open(self) -> None: ...

    def send(self, message: dict) -> None: ...

    def receive(self) -> dict | None:
        """Block for the next message; None once the peer has gone away."""
        ...

    def close(self) -> None: ...


class SocketTransport:
    """Unix-domain or TCP socket connection to a running backend."""

    def __init__(self, address: str, connect_timeout: float = 5.0) -> None:
        self.address = address
        self.connect_timeout = connect_timeout
        self._sock: socket.socket | None = None
        self._write_lock = threading.Lock()

    def open(self) -> None:
        deadline = time.monotonic() + self.connect_timeout
        last_err: OSError | None = None
        while time.monotonic() < deadline:
            try:
                self._sock = self._connect()
                logger.info("Connected to backend at %s", self.address)
                return
            except (ConnectionRefusedError, FileNotFoundError, OSError) as exc:
                last_err = exc
                time.sleep(0.05)
        raise ConnectionError(
            f"backend not reachable at {self.address!r} after {self.connect_timeout:.1f}s: {last_err}"
        )

    def _connect(self) -> socket.socket:
        if self.address.startswith(TCP_SCHEME):
            host, _, port = self.address[len(TCP_SCHEME):].rpartition(":")
            return socket.create_connection((host or "127.0.0.1", int(port)))
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(self.address)
        except OSError:
            sock.close()
            raise
        return sock

    def send(self, message: dict) -> None:
        if self._sock is None:
            raise BridgeClosed("Socket transport is not connected")
        data = encode_frame(message)
        with self._write_lock:
            try:
                self._sock.sendall(data)
            except OSError as exc:
                raise BridgeClosed(f"Backend connection lost: {exc}") from exc

    def receive(self) -> dict | None:
        sock = self._sock
        if sock is None:
            return None

        def read_exact(n: int) -> bytes:
            chunks: list[bytes] = []
            remaining = n
            while remaining > 0:
                try:
                    chunk = sock.recv(remaining)
                except OSError:
                    break
                if not chunk:
                    break
                chunks.append(chunk)
                remaining -= len(chunk)
            return b"".join(chunks)

        return read_frame(read_exact)

    def close(self) -> None:
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()


class ProcessTransport:
    """Spawn the backend and speak the framing over its stdin/stdout."""

    def __init__(self, argv: list[str]) -> None:
        if not argv:
            raise ValueError("backend command must not be empty")
        self.argv = list(argv)
        self._proc: subprocess.Popen | None = None
        self._write_lock = threading.Lock()

    def open(self) -> None:
        self._proc = subprocess.Popen(
            self.argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
        )
        logger.info("Started backend process %s (pid %s)", self.argv[0], self._proc.pid)

    def send(self, message: dict) -> None:
        proc = self._proc
        if proc is None or proc.stdin is None or proc.poll() is not None:
            raise BridgeClosed("Backend process is not running")
        data = encode_frame(message)
        with self._write_lock:
            try:
                proc.stdin.write(data)
                proc.stdin.flush()
            except (BrokenPipeError, OSError) as exc:
                raise BridgeClosed(f"Backend process pipe closed: {exc}") from exc

    def receive(self) -> dict | None:
        proc = self._proc
        if proc is None or proc.stdout is None:
            return None
        return read_frame(stream_reader(proc.stdout))

    def close(self) -> None:
        proc, self._proc = self._proc, None
        if proc is None:
            return
        if proc.stdin is not None:
            try:
                proc.stdin.close()
            except OSError:
                pass
        if proc.poll() is None:
            proc.terminate()
            try:
                proc.wait(timeout=2)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait(timeout=2)
        if proc.stdout is not None:
            proc.stdout.close()
        logger.info("Backend process exited with %s", proc.returncode)
