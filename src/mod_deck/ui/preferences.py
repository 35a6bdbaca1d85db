"""Local persistence of small UI choices (view mode, per-screen sort).

Stored as one JSON object on disk. Reads never raise: a missing or broken
file behaves like an empty store.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

from mod_deck.models.constants import (
    DEFAULT_ASSET_SORT,
    DEFAULT_ENTITY_SORT,
    DEFAULT_VIEW_MODE,
    VIEW_MODES,
)


logger = logging.getLogger(__name__)

VIEW_MODE_KEY = "entityViewMode"


def entity_sort_key(entity_slug: str) -> str:
    return f"entitySort_{entity_slug}"


def category_sort_key(category_slug: str) -> str:
    return f"categorySort_{category_slug}"


class PreferenceStore:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._values: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._values is not None:
            return self._values
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else {}
        except FileNotFoundError:
            data = {}
        except (OSError, ValueError) as exc:
            logger.error("Error reading UI preferences %s: %s", self.path, exc)
            data = {}
        self._values = data if isinstance(data, dict) else {}
        return self._values

    def get(self, key: str, default: Any = None) -> Any:
        value = self._load().get(key)
        if value is None or value == "":
            return default
        return value

    def set(self, key: str, value: Any) -> None:
        values = self._load()
        values[key] = value
        try:
            self._write(values)
        except OSError as exc:
            logger.error("Error saving UI preference %r: %s", key, exc)

    def _write(self, values: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".ui-prefs-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    # -- typed accessors ------------------------------------------------------

    def view_mode(self) -> str:
        mode = self.get(VIEW_MODE_KEY, DEFAULT_VIEW_MODE)
        return mode if mode in VIEW_MODES else DEFAULT_VIEW_MODE

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode!r}")
        self.set(VIEW_MODE_KEY, mode)

    def entity_sort(self, entity_slug: str) -> str:
        return str(self.get(entity_sort_key(entity_slug), DEFAULT_ASSET_SORT))

    def set_entity_sort(self, entity_slug: str, sort_key: str) -> None:
        self.set(entity_sort_key(entity_slug), sort_key)

    def category_sort(self, category_slug: str) -> str:
        return str(self.get(category_sort_key(category_slug), DEFAULT_ENTITY_SORT))

    def set_category_sort(self, category_slug: str, sort_key: str) -> None:
        self.set(category_sort_key(category_slug), sort_key)
