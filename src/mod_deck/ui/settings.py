"""Backend-backed cache of the application's key/value settings.

Constructed explicitly and handed to whatever owns the app lifecycle; it
decides whether the first-run setup or the main window is shown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError
from mod_deck.models.constants import (
    SETTINGS_KEY_CUSTOM_URL,
    SETTINGS_KEY_MODS_FOLDER,
    SETTINGS_KEY_QUICK_LAUNCH,
    WELL_KNOWN_SETTINGS,
)


logger = logging.getLogger(__name__)

LOAD_ERROR = "Could not load application settings."


@dataclass(slots=True)
class SettingsStore:
    backend: ModBackend
    values: dict[str, str] = field(default_factory=dict)
    is_loading: bool = True
    error: str | None = None

    def load(self) -> bool:
        """Fetch every well-known key; on failure all values are empty."""
        self.is_loading = True
        self.error = None
        try:
            fetched = {key: self.backend.get_setting(key) or "" for key in WELL_KNOWN_SETTINGS}
        except BackendError as exc:
            logger.warning("Failed to fetch settings: %s", exc)
            self.values = {key: "" for key in WELL_KNOWN_SETTINGS}
            self.error = LOAD_ERROR
            return False
        finally:
            self.is_loading = False
        self.values = fetched
        logger.debug("Fetched settings: %s", self.values)
        return True

    def get(self, key: str) -> str:
        return self.values.get(key, "")

    def update(self, key: str, value: str) -> tuple[bool, str | None]:
        try:
            self.backend.set_setting(key, value)
        except BackendError as exc:
            logger.warning("Failed to set setting %s: %s", key, exc)
            self.error = f"Failed to save setting: {key}"
            return False, self.error
        self.values[key] = value
        return True, None

    @property
    def mods_folder(self) -> str:
        return self.get(SETTINGS_KEY_MODS_FOLDER)

    @property
    def quick_launch_path(self) -> str:
        return self.get(SETTINGS_KEY_QUICK_LAUNCH)

    @property
    def custom_url(self) -> str:
        return self.get(SETTINGS_KEY_CUSTOM_URL)

    @property
    def is_setup_complete(self) -> bool:
        return not self.is_loading and bool(self.mods_folder) and bool(self.quick_launch_path)
