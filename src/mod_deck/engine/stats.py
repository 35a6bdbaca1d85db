"""Library statistics computed from already-fetched entity lists."""

from __future__ import annotations

from dataclasses import dataclass

from mod_deck.models.catalog import Category, Entity


@dataclass(frozen=True, slots=True)
class LibraryStats:
    total_mods: int
    entities_with_mods: int
    top_entities: list[tuple[str, int]]
    mods_by_category: dict[str, int]


def library_stats(
    entities_by_category: dict[Category, list[Entity]],
    *,
    top: int = 5,
) -> LibraryStats:
    total = 0
    with_mods = 0
    per_entity: list[tuple[str, int]] = []
    per_category: dict[str, int] = {}
    for category, entities in entities_by_category.items():
        category_total = 0
        for entity in entities:
            count = max(0, entity.mod_count or 0)
            category_total += count
            if count:
                with_mods += 1
                per_entity.append((entity.name, count))
        per_category[category.name] = category_total
        total += category_total
    per_entity.sort(key=lambda row: (-row[1], row[0].casefold()))
    return LibraryStats(
        total_mods=total,
        entities_with_mods=with_mods,
        top_entities=per_entity[:top],
        mods_by_category=per_category,
    )
