from mod_deck.engine.stats import library_stats
from mod_deck.models.catalog import Category, Entity


def _entity(entity_id: int, name: str, count: int) -> Entity:
    return Entity(id=entity_id, category_id=1, name=name, slug=name.lower(), mod_count=count)


def test_library_stats_totals_and_top_entities():
    characters = Category(id=1, name="Characters", slug="characters")
    weapons = Category(id=2, name="Weapons", slug="weapons")
    stats = library_stats(
        {
            characters: [_entity(1, "diluc", 4), _entity(2, "Amber", 4), _entity(3, "Kaeya", 0)],
            weapons: [_entity(4, "Sword", 2)],
        },
        top=2,
    )
    assert stats.total_mods == 10
    assert stats.entities_with_mods == 3
    assert stats.top_entities == [("Amber", 4), ("diluc", 4)]
    assert stats.mods_by_category == {"Characters": 8, "Weapons": 2}


def test_library_stats_empty():
    stats = library_stats({})
    assert stats.total_mods == 0
    assert stats.top_entities == []
