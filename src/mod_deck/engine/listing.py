"""Client-side filtering, sorting and selection over fetched lists.

Pure functions over model records; no backend access. Sorting is stable, so
records that compare equal under a key keep their fetched order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Literal

from mod_deck.models.asset import Asset
from mod_deck.models.catalog import Entity
from mod_deck.models.constants import (
    ASSET_SORT_OPTIONS,
    DEFAULT_ASSET_SORT,
    ELEMENT_FILTER_CATEGORY,
    ENTITY_SORT_OPTIONS,
)


ASSET_SORT_KEYS = frozenset(value for value, _label in ASSET_SORT_OPTIONS)
ENTITY_SORT_KEYS = frozenset(value for value, _label in ENTITY_SORT_OPTIONS)

CheckState = Literal["unchecked", "checked", "indeterminate"]


def _name_key(name: str) -> tuple[str, str]:
    # Case-insensitive first, raw name as a deterministic tiebreak.
    return (name.casefold(), name)


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.casefold()


# -- assets -----------------------------------------------------------------


def matches_search(asset: Asset, term: str) -> bool:
    needle = term.casefold()
    if not needle:
        return True
    return (
        _contains(asset.name, needle)
        or _contains(asset.author, needle)
        or _contains(asset.category_tag, needle)
    )


def matches_types(asset: Asset, active_types: Iterable[str]) -> bool:
    active = set(active_types)
    if not active:
        return True
    types = asset.types()
    if not types:
        return False
    return any(t in active for t in types)


def sort_assets(assets: Iterable[Asset], sort_key: str) -> list[Asset]:
    rows = list(assets)
    if sort_key not in ASSET_SORT_KEYS:
        sort_key = DEFAULT_ASSET_SORT
    if sort_key == "name-asc":
        return sorted(rows, key=lambda a: _name_key(a.name))
    if sort_key == "name-desc":
        return sorted(rows, key=lambda a: _name_key(a.name), reverse=True)
    if sort_key == "id-asc":
        return sorted(rows, key=lambda a: a.id)
    if sort_key == "id-desc":
        return sorted(rows, key=lambda a: a.id, reverse=True)
    if sort_key == "enabled-desc":
        return sorted(rows, key=lambda a: not a.is_enabled)
    return sorted(rows, key=lambda a: a.is_enabled)


def filter_and_sort_assets(
    assets: Iterable[Asset],
    *,
    search: str = "",
    active_types: Iterable[str] = (),
    sort_key: str = DEFAULT_ASSET_SORT,
) -> list[Asset]:
    active = set(active_types)
    kept = [a for a in assets if matches_search(a, search) and matches_types(a, active)]
    return sort_assets(kept, sort_key)


# -- entities ---------------------------------------------------------------


def _entity_order(rows: list[Entity], sort_key: str, *, fallback_name: bool) -> list[Entity]:
    if sort_key == "name-asc":
        return sorted(rows, key=lambda e: _name_key(e.name))
    if sort_key == "name-desc":
        return sorted(rows, key=lambda e: _name_key(e.name), reverse=True)
    if sort_key == "count-desc":
        return sorted(rows, key=lambda e: e.mod_count or 0, reverse=True)
    if sort_key == "count-asc":
        return sorted(rows, key=lambda e: e.mod_count or 0)
    if fallback_name:
        return sorted(rows, key=lambda e: _name_key(e.name))
    return rows


def sort_entities(entities: Iterable[Entity], sort_key: str) -> list[Entity]:
    """Sort with every "-other" entity ahead of the rest, for any key."""
    rows = list(entities)
    others = [e for e in rows if e.is_other]
    regular = [e for e in rows if not e.is_other]
    return (
        _entity_order(others, sort_key, fallback_name=True)
        + _entity_order(regular, sort_key, fallback_name=False)
    )


def filter_and_sort_entities(
    entities: Iterable[Entity],
    *,
    category_slug: str = "",
    search: str = "",
    element: str = "all",
    sort_key: str = "name-asc",
) -> list[Entity]:
    needle = search.casefold()
    use_element = category_slug == ELEMENT_FILTER_CATEGORY and element and element != "all"
    kept: list[Entity] = []
    for entity in entities:
        if use_element and entity.detail_fields().get("element") != element:
            continue
        if needle and needle not in entity.name.casefold():
            continue
        kept.append(entity)
    return sort_entities(kept, sort_key)


# -- selection --------------------------------------------------------------


@dataclass(slots=True)
class SelectionState:
    """Selected asset ids for bulk actions."""

    selected: set[int] = field(default_factory=set)

    def set_selected(self, asset_id: int, is_selected: bool) -> None:
        if is_selected:
            self.selected.add(asset_id)
        else:
            self.selected.discard(asset_id)

    def select_all(self, visible: Iterable[Asset], checked: bool) -> None:
        self.selected = {a.id for a in visible} if checked else set()

    def clear(self) -> None:
        self.selected.clear()

    def prune(self, visible: Iterable[Asset]) -> None:
        ids = {a.id for a in visible}
        self.selected &= ids

    def __len__(self) -> int:
        return len(self.selected)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self.selected


def select_all_state(selected_count: int, visible_count: int) -> CheckState:
    if visible_count > 0 and selected_count == visible_count:
        return "checked"
    if 0 < selected_count < visible_count:
        return "indeterminate"
    return "unchecked"
