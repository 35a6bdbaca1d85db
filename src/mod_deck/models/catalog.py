"""Category and entity records as the backend reports them."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging

from mod_deck.models.constants import OTHER_ENTITY_SUFFIX


logger = logging.getLogger(__name__)


def parse_details(raw: str | None) -> dict:
    """Decode a free-form ``details`` JSON string; bad or empty input gives ``{}``."""
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed details JSON: %r", raw)
        return {}
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True, slots=True)
class Category:
    id: int
    name: str
    slug: str

    @classmethod
    def from_json(cls, data: dict) -> Category:
        return cls(id=int(data["id"]), name=str(data["name"]), slug=str(data["slug"]))


@dataclass(frozen=True, slots=True)
class Entity:
    """A game character/object that mods attach to."""

    id: int
    category_id: int
    name: str
    slug: str
    description: str | None = None
    details: str | None = None
    base_image: str | None = None
    mod_count: int = 0
    enabled_mod_count: int | None = None

    @classmethod
    def from_json(cls, data: dict) -> Entity:
        enabled = data.get("enabled_mod_count")
        return cls(
            id=int(data["id"]),
            category_id=int(data.get("category_id", 0)),
            name=str(data["name"]),
            slug=str(data["slug"]),
            description=data.get("description"),
            details=data.get("details"),
            base_image=data.get("base_image"),
            mod_count=int(data.get("mod_count") or 0),
            enabled_mod_count=int(enabled) if enabled is not None else None,
        )

    @property
    def is_other(self) -> bool:
        return self.slug.endswith(OTHER_ENTITY_SUFFIX)

    def detail_fields(self) -> dict:
        return parse_details(self.details)

    def types(self) -> list[str]:
        types = self.detail_fields().get("types")
        if not isinstance(types, list):
            return []
        return [str(t) for t in types]
