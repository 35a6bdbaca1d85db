"""Mod (asset) records and per-mod extras."""

from __future__ import annotations

from dataclasses import dataclass, replace

from mod_deck.models.catalog import parse_details


@dataclass(frozen=True, slots=True)
class Asset:
    """A user-installed mod belonging to one entity.

    ``folder_name`` is the on-disk path relative to the entity folder; its
    last segment carries the disabled prefix while the mod is disabled.
    """

    id: int
    entity_id: int
    name: str
    folder_name: str
    is_enabled: bool
    description: str | None = None
    image_filename: str | None = None
    author: str | None = None
    category_tag: str | None = None   # comma-separated free text
    details: str | None = None

    @classmethod
    def from_json(cls, data: dict) -> Asset:
        return cls(
            id=int(data["id"]),
            entity_id=int(data.get("entity_id", 0)),
            name=str(data["name"]),
            folder_name=str(data.get("folder_name", "")),
            is_enabled=bool(data.get("is_enabled", False)),
            description=data.get("description"),
            image_filename=data.get("image_filename"),
            author=data.get("author"),
            category_tag=data.get("category_tag"),
            details=data.get("details"),
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "entity_id": self.entity_id,
            "name": self.name,
            "description": self.description,
            "folder_name": self.folder_name,
            "image_filename": self.image_filename,
            "author": self.author,
            "category_tag": self.category_tag,
            "is_enabled": self.is_enabled,
        }

    def tags(self) -> list[str]:
        if not self.category_tag:
            return []
        return [part.strip() for part in self.category_tag.split(",") if part.strip()]

    def types(self) -> list[str] | None:
        """Declared mod types, or None when the mod carries no type list."""
        types = parse_details(self.details).get("types")
        if not isinstance(types, list):
            return None
        return [str(t) for t in types]

    def with_changes(self, **changes) -> Asset:
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class Keybind:
    """One key binding found in a mod's INI files."""

    title: str
    key: str

    @classmethod
    def from_json(cls, data: dict) -> Keybind:
        return cls(title=str(data.get("title", "")), key=str(data.get("key", "")))
