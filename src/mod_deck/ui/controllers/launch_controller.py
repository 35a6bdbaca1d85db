"""Controller for the Quick Launch action."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError, ElevationRequired
from mod_deck.ui.settings import SettingsStore


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LaunchController:
    backend: ModBackend
    settings: SettingsStore
    launching: bool = False

    def launch(self) -> tuple[bool, str | None]:
        """Start the configured executable, elevating when Windows demands it."""
        path = self.settings.quick_launch_path
        if not path:
            return False, "Quick Launch path not set in Settings."
        if self.launching:
            return False, "Launch already in progress."
        self.launching = True
        try:
            return self._launch(path)
        finally:
            self.launching = False

    def _launch(self, path: str) -> tuple[bool, str | None]:
        try:
            self.backend.launch_executable(path)
        except ElevationRequired:
            logger.info("Launch of %s needs elevation; retrying as admin", path)
            return self._launch_elevated(path)
        except BackendError as exc:
            return False, f"Launch Failed: {exc}"
        return True, None

    def _launch_elevated(self, path: str) -> tuple[bool, str | None]:
        try:
            self.backend.launch_executable_elevated(path)
        except BackendError as exc:
            message = str(exc)
            if "cancelled by user" in message.lower():
                return False, "Admin launch cancelled by user."
            return False, f"Elevated launch failed: {message}"
        return True, None
