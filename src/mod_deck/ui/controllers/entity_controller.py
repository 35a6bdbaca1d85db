"""Controller for the entity page: one entity and its installed mods."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError, NotFound
from mod_deck.engine.listing import (
    ASSET_SORT_KEYS,
    CheckState,
    SelectionState,
    filter_and_sort_assets,
    select_all_state,
)
from mod_deck.engine.mutations import (
    bulk_set_enabled,
    drop_by_id,
    patch_toggled,
    reconcile_after,
    replace_asset,
)
from mod_deck.models.asset import Asset, Keybind
from mod_deck.models.catalog import Entity
from mod_deck.models.constants import DEFAULT_ASSET_SORT
from mod_deck.ui.preferences import PreferenceStore
from mod_deck.ui.state import UiState


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EntityController:
    """Owns entity page actions."""

    backend: ModBackend
    prefs: PreferenceStore
    state: UiState
    entity_slug: str = ""
    entity: Entity | None = None
    assets: list[Asset] = field(default_factory=list)
    search: str = ""
    active_types: set[str] = field(default_factory=set)
    sort_key: str = DEFAULT_ASSET_SORT
    selection: SelectionState = field(default_factory=SelectionState)
    error: str | None = None
    toggling: set[int] = field(default_factory=set)
    bulk_running: bool = False
    on_change: Callable[[], None] | None = None

    # -- loading --------------------------------------------------------------

    def load(self, entity_slug: str) -> tuple[bool, str | None]:
        """Fetch details and mods for ``entity_slug``; clears page state first."""
        self.entity_slug = entity_slug
        self.state.current_entity = entity_slug
        self.entity = None
        self.assets = []
        self.search = ""
        self.active_types = set()
        self.selection.clear()
        self.error = None
        self.sort_key = self.prefs.entity_sort(entity_slug)
        try:
            self.entity = self.backend.get_entity_details(entity_slug)
            self.assets = self.backend.get_assets_for_entity(entity_slug)
        except NotFound:
            self.entity = None
            self.error = f"Entity '{entity_slug}' not found."
        except BackendError as exc:
            self.entity = None
            self.error = f"Could not load details or mods for {entity_slug}. Details: {exc}"
        self._notify_changed()
        return self.error is None, self.error

    def reload(self) -> tuple[bool, str | None]:
        if not self.entity_slug:
            return False, "No entity selected."
        return self.load(self.entity_slug)

    def _refetch_assets(self) -> list[Asset]:
        return self.backend.get_assets_for_entity(self.entity_slug)

    def _refetch_entity(self) -> None:
        try:
            self.entity = self.backend.get_entity_details(self.entity_slug)
        except BackendError as exc:
            logger.warning("Failed to refresh entity details for %s: %s", self.entity_slug, exc)

    # -- listing ----------------------------------------------------------------

    def visible_assets(self) -> list[Asset]:
        return filter_and_sort_assets(
            self.assets,
            search=self.search,
            active_types=self.active_types,
            sort_key=self.sort_key,
        )

    def available_types(self) -> list[str]:
        seen: dict[str, None] = {}
        if self.entity is not None:
            seen.update(dict.fromkeys(self.entity.types()))
        for asset in self.assets:
            seen.update(dict.fromkeys(asset.types() or []))
        return sorted(seen, key=str.casefold)

    def set_search(self, term: str) -> None:
        self.search = term

    def set_type_active(self, type_name: str, active: bool) -> None:
        if active:
            self.active_types.add(type_name)
        else:
            self.active_types.discard(type_name)

    def set_sort(self, sort_key: str) -> None:
        if sort_key not in ASSET_SORT_KEYS:
            sort_key = DEFAULT_ASSET_SORT
        self.sort_key = sort_key
        self.prefs.set_entity_sort(self.entity_slug, sort_key)

    def view_mode(self) -> str:
        return self.prefs.view_mode()

    def set_view_mode(self, mode: str) -> None:
        self.prefs.set_view_mode(mode)
        self.selection.clear()

    def enabled_count(self) -> int:
        return sum(1 for a in self.assets if a.is_enabled)

    def image_path(self, asset: Asset) -> Path | None:
        if not asset.image_filename:
            return None
        try:
            return self.backend.get_asset_image_path(
                self.entity_slug, asset.folder_name, asset.image_filename
            )
        except BackendError as exc:
            logger.debug("No image for asset %s: %s", asset.id, exc)
            return None

    # -- selection --------------------------------------------------------------

    def set_selected(self, asset_id: int, is_selected: bool) -> None:
        self.selection.set_selected(asset_id, is_selected)

    def select_all(self, checked: bool) -> None:
        self.selection.select_all(self.visible_assets(), checked)

    def select_all_state(self) -> CheckState:
        visible = self.visible_assets()
        visible_ids = {a.id for a in visible}
        selected = sum(1 for i in self.selection.selected if i in visible_ids)
        return select_all_state(selected, len(visible))

    # -- mutations --------------------------------------------------------------

    def toggle(self, asset_id: int) -> tuple[bool, str | None]:
        asset = self._find(asset_id)
        if asset is None:
            return False, f"Mod {asset_id} is not on this page."
        if asset_id in self.toggling:
            return False, None
        self.toggling.add(asset_id)
        try:
            new_state = self.backend.toggle_asset_enabled(self.entity_slug, asset)
        except BackendError as exc:
            return False, f"Failed to toggle mod: {exc}"
        finally:
            self.toggling.discard(asset_id)
        self.assets = replace_asset(self.assets, patch_toggled(asset, new_state))
        self._refetch_entity()
        self._notify_changed()
        return True, None

    def bulk_set_enabled(
        self,
        enable: bool,
        on_step: Callable[[int, int], None] | None = None,
    ) -> tuple[bool, str | None]:
        if self.bulk_running:
            return False, "A bulk action is already running."
        if not self.selection.selected:
            return False, "No mods selected."
        self.bulk_running = True
        try:
            result = bulk_set_enabled(
                self.assets,
                sorted(self.selection.selected),
                enable,
                lambda a: self.backend.toggle_asset_enabled(self.entity_slug, a),
                on_step,
            )
        finally:
            self.bulk_running = False
        self.assets = result.assets
        self.selection.clear()
        self._refetch_entity()
        self._notify_changed()
        return result.failed == 0, result.summary()

    def save_details(
        self,
        asset_id: int,
        *,
        name: str,
        description: str = "",
        author: str = "",
        category_tag: str = "",
        selected_image_path: str | None = None,
    ) -> tuple[bool, str | None]:
        name = name.strip()
        if not name:
            return False, "Mod name cannot be empty."
        description, author, category_tag = description.strip(), author.strip(), category_tag.strip()

        def _patched(relocated: str | None) -> list[Asset]:
            if relocated and relocated != self.entity_slug:
                return drop_by_id(self.assets, asset_id)
            current = next((a for a in self.assets if a.id == asset_id), None)
            if current is None:
                return list(self.assets)
            return replace_asset(
                self.assets,
                current.with_changes(
                    name=name,
                    description=description or None,
                    author=author or None,
                    category_tag=category_tag or None,
                ),
            )

        try:
            relocated, fresh = reconcile_after(
                lambda: self.backend.update_asset_info(
                    asset_id,
                    name=name,
                    description=description,
                    author=author,
                    category_tag=category_tag,
                    selected_image_path=selected_image_path,
                ),
                self._refetch_assets,
                _patched,
            )
        except BackendError as exc:
            return False, f"Failed to save changes: {exc}"
        self.assets = fresh
        self.selection.clear()
        self._refetch_entity()
        self._notify_changed()
        if relocated and relocated != self.entity_slug:
            return True, f"Mod relocated to {relocated}."
        return True, "Mod details updated."

    def delete(self, asset_id: int) -> tuple[bool, str | None]:
        try:
            _none, fresh = reconcile_after(
                lambda: self.backend.delete_asset(asset_id),
                self._refetch_assets,
                lambda _none: drop_by_id(self.assets, asset_id),
            )
        except BackendError as exc:
            return False, f"Failed to delete: {exc}"
        self.assets = fresh
        self.selection.clear()
        self._refetch_entity()
        self._notify_changed()
        return True, None

    def keybinds(self, asset_id: int) -> tuple[list[Keybind], str | None]:
        try:
            return self.backend.get_ini_keybinds(asset_id), None
        except BackendError as exc:
            return [], f"Could not read keybinds: {exc}"

    def open_folder(self, asset_id: int) -> tuple[bool, str | None]:
        try:
            self.backend.open_asset_folder(asset_id)
        except BackendError as exc:
            return False, f"Could not open folder: {exc}"
        return True, None

    def add_to_presets(self, asset_id: int, preset_ids: list[int]) -> tuple[bool, str | None]:
        if not preset_ids:
            return False, "Select at least one preset."
        try:
            self.backend.add_asset_to_presets(asset_id, preset_ids)
        except BackendError as exc:
            return False, f"Failed to add to presets: {exc}"
        count = len(preset_ids)
        return True, f"Added to {count} preset{'s' if count != 1 else ''}."

    def _find(self, asset_id: int) -> Asset | None:
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None

    def _notify_changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
