"""Controller for the settings page and first-run setup."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError, OperationInProgress
from mod_deck.bridge.events import OperationHandle, OperationUpdate
from mod_deck.models.constants import (
    SETTINGS_KEY_CUSTOM_URL,
    SETTINGS_KEY_MODS_FOLDER,
    SETTINGS_KEY_QUICK_LAUNCH,
)
from mod_deck.ui.settings import SettingsStore


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SettingsController:
    """Owns settings edits, library scans and folder shortcuts."""

    backend: ModBackend
    settings: SettingsStore
    scan_handle: OperationHandle | None = None

    def choose_mods_folder(self) -> tuple[bool, str | None]:
        try:
            path = self.backend.select_directory()
        except BackendError as exc:
            return False, f"Could not open folder dialog: {exc}"
        if path is None:
            return False, None
        return self.settings.update(SETTINGS_KEY_MODS_FOLDER, str(path))

    def choose_quick_launch(self) -> tuple[bool, str | None]:
        try:
            path = self.backend.select_file()
        except BackendError as exc:
            return False, f"Could not open file dialog: {exc}"
        if path is None:
            return False, None
        return self.settings.update(SETTINGS_KEY_QUICK_LAUNCH, str(path))

    def save_custom_url(self, url: str) -> tuple[bool, str | None]:
        return self.settings.update(SETTINGS_KEY_CUSTOM_URL, url.strip())

    def open_mods_folder(self) -> tuple[bool, str | None]:
        if not self.settings.mods_folder:
            return False, "Mods folder path not set in Settings."
        try:
            self.backend.open_mods_folder()
        except BackendError as exc:
            return False, f"Could not open mods folder: {exc}"
        return True, None

    @property
    def is_scanning(self) -> bool:
        return self.scan_handle is not None and not self.scan_handle.done()

    def scan(
        self,
        on_update: Callable[[OperationUpdate], None] | None = None,
    ) -> tuple[bool, str | None]:
        """Start a library scan. ``on_update`` runs on the bridge reader thread."""
        if not self.settings.mods_folder:
            return False, "Please set the mods folder first."
        try:
            handle = self.backend.scan_mods_directory()
        except OperationInProgress:
            return False, "A scan is already running."
        except BackendError as exc:
            return False, f"Failed to start scan: {exc}"
        self.scan_handle = handle
        if on_update is not None:
            handle.add_listener(on_update)
        return True, None
