"""Controller for the presets page."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError, OperationInProgress
from mod_deck.bridge.events import OperationHandle, OperationUpdate
from mod_deck.engine.mutations import drop_by_id, reconcile_after
from mod_deck.models.preset import Preset


logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Another preset action is running."


@dataclass(slots=True)
class PresetController:
    """Owns preset list actions; one preset action at a time."""

    backend: ModBackend
    presets: list[Preset] = field(default_factory=list)
    favorite_presets: list[Preset] = field(default_factory=list)
    error: str | None = None
    busy: str | None = None
    apply_handle: OperationHandle | None = None
    on_change: Callable[[], None] | None = None

    def refresh(self) -> tuple[bool, str | None]:
        self.error = None
        try:
            self.presets = self.backend.get_presets()
        except BackendError as exc:
            self.error = f"Could not load presets: {exc}"
            return False, self.error
        finally:
            self._notify_changed()
        return True, None

    def favorites(self) -> list[Preset]:
        return [p for p in self.presets if p.is_favorite]

    def load_favorites(self) -> tuple[bool, str | None]:
        """Fetch favorites for the sidebar quick-apply list."""
        try:
            self.favorite_presets = self.backend.get_favorite_presets()
        except BackendError as exc:
            logger.warning("Failed to fetch favorite presets: %s", exc)
            self.favorite_presets = []
            return False, f"Could not load favorite presets: {exc}"
        return True, None

    @property
    def is_busy(self) -> bool:
        if self.apply_handle is not None and not self.apply_handle.done():
            return True
        return self.busy is not None

    def create(self, name: str) -> tuple[bool, str | None]:
        name = name.strip()
        if not name:
            return False, "Preset name cannot be empty."
        if self.is_busy:
            return False, BUSY_MESSAGE
        self.busy = "create"
        try:
            _created, self.presets = reconcile_after(
                lambda: self.backend.create_preset(name),
                self.backend.get_presets,
                lambda created: self.presets + ([created] if created is not None else []),
            )
        except BackendError as exc:
            return False, f"Failed to create preset: {exc}"
        finally:
            self.busy = None
            self._notify_changed()
        return True, f"Preset '{name}' created."

    def delete(self, preset_id: int) -> tuple[bool, str | None]:
        if self.is_busy:
            return False, BUSY_MESSAGE
        self.busy = "delete"
        try:
            _none, self.presets = reconcile_after(
                lambda: self.backend.delete_preset(preset_id),
                self.backend.get_presets,
                lambda _none: drop_by_id(self.presets, preset_id),
            )
        except BackendError as exc:
            return False, f"Failed to delete preset: {exc}"
        finally:
            self.busy = None
            self._notify_changed()
        return True, "Preset deleted."

    def overwrite(self, preset_id: int) -> tuple[bool, str | None]:
        if self.is_busy:
            return False, BUSY_MESSAGE
        self.busy = "overwrite"
        try:
            self.backend.overwrite_preset(preset_id)
        except BackendError as exc:
            return False, f"Failed to overwrite preset: {exc}"
        finally:
            self.busy = None
        return True, "Preset updated with the current mod states."

    def toggle_favorite(self, preset_id: int) -> tuple[bool, str | None]:
        """Flip the favorite flag locally first; revert if the backend refuses."""
        if self.is_busy:
            return False, BUSY_MESSAGE
        original = next((p for p in self.presets if p.id == preset_id), None)
        if original is None:
            return False, f"Preset {preset_id} not found."
        flipped = Preset(id=original.id, name=original.name, is_favorite=not original.is_favorite)
        self.presets = [flipped if p.id == preset_id else p for p in self.presets]
        self._notify_changed()
        try:
            self.backend.toggle_preset_favorite(preset_id, flipped.is_favorite)
        except BackendError as exc:
            self.presets = [original if p.id == preset_id else p for p in self.presets]
            self._notify_changed()
            return False, f"Failed to update favorite: {exc}"
        return True, None

    def apply(
        self,
        preset_id: int,
        on_update: Callable[[OperationUpdate], None] | None = None,
    ) -> tuple[bool, str | None]:
        """Start applying a preset; progress is delivered to ``on_update``.

        The listener runs on the bridge reader thread.
        """
        if self.is_busy:
            return False, BUSY_MESSAGE
        try:
            handle = self.backend.apply_preset(preset_id)
        except OperationInProgress:
            return False, BUSY_MESSAGE
        except BackendError as exc:
            return False, f"Failed to apply preset: {exc}"
        self.apply_handle = handle
        if on_update is not None:
            handle.add_listener(on_update)
        return True, None

    def _notify_changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
