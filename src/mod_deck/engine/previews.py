"""Transient preview images.

Image bytes read through the backend are written to a private temp file so
the toolkit can load them by path. Each handle is owned by exactly one
widget or controller and must be released on close or replacement.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
import tempfile


logger = logging.getLogger(__name__)

_SUFFIXES = {
    "jpg": ".jpg",
    "jpeg": ".jpg",
    "gif": ".gif",
    "webp": ".webp",
    "png": ".png",
}


def image_suffix(source_name: str | None) -> str:
    _stem, dot, ext = (source_name or "").rpartition(".")
    if not dot:
        return ".png"
    return _SUFFIXES.get(ext.lower(), ".png")


class PreviewHandle:
    """A temp-file copy of one preview image."""

    __slots__ = ("_path", "source_name")

    def __init__(self, data: bytes, source_name: str | None = None) -> None:
        self.source_name = source_name
        fd, name = tempfile.mkstemp(prefix="mod-deck-preview-", suffix=image_suffix(source_name))
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        self._path: Path | None = Path(name)

    @property
    def path(self) -> Path:
        if self._path is None:
            raise ValueError("Preview handle has been released")
        return self._path

    @property
    def released(self) -> bool:
        return self._path is None

    def close(self) -> None:
        path, self._path = self._path, None
        if path is None:
            return
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove preview %s: %s", path, exc)

    def __enter__(self) -> PreviewHandle:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()


class PreviewSlot:
    """Holds at most one live preview; replacing releases the previous one."""

    __slots__ = ("_handle",)

    def __init__(self) -> None:
        self._handle: PreviewHandle | None = None

    @property
    def handle(self) -> PreviewHandle | None:
        return self._handle

    def replace(self, handle: PreviewHandle | None) -> None:
        old, self._handle = self._handle, handle
        if old is not None and old is not handle:
            old.close()

    def load(self, data: bytes, source_name: str | None = None) -> PreviewHandle:
        handle = PreviewHandle(data, source_name)
        self.replace(handle)
        return handle

    def clear(self) -> None:
        self.replace(None)
