"""Typed backend API: one method per backend command.

Argument names on the wire are camelCase, the backend's convention; the
Python side keeps snake_case and converts results into model records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mod_deck.bridge.client import BridgeClient
from mod_deck.bridge.events import OperationHandle
from mod_deck.models.archive import ArchiveAnalysis, ImportRequest
from mod_deck.models.asset import Asset, Keybind
from mod_deck.models.catalog import Category, Entity
from mod_deck.models.constants import PRESET_APPLY_EVENTS, SCAN_EVENTS
from mod_deck.models.preset import Preset


def _optional_path(value: Any) -> Path | None:
    if value in (None, ""):
        return None
    return Path(str(value))


class ModBackend:
    """Statically shaped facade over ``BridgeClient.call``."""

    def __init__(self, client: BridgeClient) -> None:
        self.client = client

    def _call(self, command: str, **args: Any) -> Any:
        return self.client.call(command, args)

    # -- settings & system ----------------------------------------------------

    def get_setting(self, key: str) -> str | None:
        value = self._call("get_setting", key=key)
        return None if value is None else str(value)

    def set_setting(self, key: str, value: str) -> None:
        self._call("set_setting", key=key, value=value)

    def select_directory(self) -> Path | None:
        return _optional_path(self._call("select_directory"))

    def select_file(self) -> Path | None:
        return _optional_path(self._call("select_file"))

    def select_archive_file(self) -> Path | None:
        return _optional_path(self._call("select_archive_file"))

    def launch_executable(self, path: str) -> None:
        self._call("launch_executable", path=path)

    def launch_executable_elevated(self, path: str) -> None:
        self._call("launch_executable_elevated", path=path)

    def open_mods_folder(self) -> None:
        self._call("open_mods_folder")

    def get_active_game(self) -> str | None:
        value = self._call("get_active_game")
        return str(value) if value else None

    def read_binary_file(self, path: str | Path) -> bytes:
        return bytes(self._call("read_binary_file", path=str(path)) or [])

    # -- catalog ----------------------------------------------------------------

    def get_categories(self) -> list[Category]:
        return [Category.from_json(row) for row in self._call("get_categories") or []]

    def get_entities_by_category(self, category_slug: str) -> list[Entity]:
        rows = self._call("get_entities_by_category", categorySlug=category_slug) or []
        return [Entity.from_json(row) for row in rows]

    def get_entity_details(self, entity_slug: str) -> Entity:
        return Entity.from_json(self._call("get_entity_details", entitySlug=entity_slug))

    def get_assets_for_entity(self, entity_slug: str) -> list[Asset]:
        rows = self._call("get_assets_for_entity", entitySlug=entity_slug) or []
        return [Asset.from_json(row) for row in rows]

    def get_total_asset_count(self) -> int:
        return int(self._call("get_total_asset_count") or 0)

    def get_asset_image_path(self, entity_slug: str, folder_name: str, image_filename: str) -> Path:
        value = self._call(
            "get_asset_image_path",
            entitySlug=entity_slug,
            folderNameOnDisk=folder_name,
            imageFilename=image_filename,
        )
        return Path(str(value))

    # -- mod mutations ----------------------------------------------------------

    def toggle_asset_enabled(self, entity_slug: str, asset: Asset) -> bool:
        """Flip a mod's state; returns the new enabled flag."""
        return bool(self._call("toggle_asset_enabled", entitySlug=entity_slug, asset=asset.to_json()))

    def update_asset_info(
        self,
        asset_id: int,
        *,
        name: str,
        description: str | None = None,
        author: str | None = None,
        category_tag: str | None = None,
        selected_image_path: str | None = None,
    ) -> str | None:
        """Save edited metadata; returns the entity slug the mod now lives under, if reported."""
        result = self._call(
            "update_asset_info",
            assetId=asset_id,
            name=name,
            description=description or None,
            author=author or None,
            categoryTag=category_tag or None,
            selectedImageAbsolutePath=selected_image_path,
        )
        if isinstance(result, dict):
            slug = result.get("entity_slug") or result.get("target_entity_slug")
            return str(slug) if slug else None
        return str(result) if isinstance(result, str) and result else None

    def delete_asset(self, asset_id: int) -> None:
        self._call("delete_asset", assetId=asset_id)

    def open_asset_folder(self, asset_id: int) -> None:
        self._call("open_asset_folder", assetId=asset_id)

    def get_ini_keybinds(self, asset_id: int) -> list[Keybind]:
        return [Keybind.from_json(row) for row in self._call("get_ini_keybinds", assetId=asset_id) or []]

    # -- import -------------------------------------------------------------------

    def analyze_archive(self, file_path: str | Path) -> ArchiveAnalysis:
        return ArchiveAnalysis.from_json(self._call("analyze_archive", filePathStr=str(file_path)))

    def read_archive_file_content(self, archive_path: str, internal_path: str) -> bytes:
        data = self._call(
            "read_archive_file_content",
            archivePathStr=archive_path,
            internalFilePath=internal_path,
        )
        return bytes(data or [])

    def import_archive(self, request: ImportRequest) -> None:
        # Extraction time grows with archive size, so no call timeout applies.
        self.client.call("import_archive", request.to_args(), timeout=None)

    # -- presets ------------------------------------------------------------------

    def get_presets(self) -> list[Preset]:
        return [Preset.from_json(row) for row in self._call("get_presets") or []]

    def get_favorite_presets(self) -> list[Preset]:
        return [Preset.from_json(row) for row in self._call("get_favorite_presets") or []]

    def create_preset(self, name: str) -> Preset | None:
        result = self._call("create_preset", name=name)
        return Preset.from_json(result) if isinstance(result, dict) else None

    def overwrite_preset(self, preset_id: int) -> None:
        self._call("overwrite_preset", presetId=preset_id)

    def delete_preset(self, preset_id: int) -> None:
        self._call("delete_preset", presetId=preset_id)

    def toggle_preset_favorite(self, preset_id: int, is_favorite: bool) -> None:
        self._call("toggle_preset_favorite", presetId=preset_id, isFavorite=is_favorite)

    def add_asset_to_presets(self, asset_id: int, preset_ids: list[int]) -> None:
        self._call("add_asset_to_presets", assetId=asset_id, presetIds=list(preset_ids))

    # -- tracked operations -------------------------------------------------------

    def scan_mods_directory(self) -> OperationHandle:
        return self.client.start_operation(SCAN_EVENTS, "scan_mods_directory")

    def apply_preset(self, preset_id: int) -> OperationHandle:
        return self.client.start_operation(PRESET_APPLY_EVENTS, "apply_preset", {"presetId": preset_id})
