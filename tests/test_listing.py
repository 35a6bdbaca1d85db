from mod_deck.engine.listing import (
    SelectionState,
    filter_and_sort_assets,
    filter_and_sort_entities,
    select_all_state,
    sort_assets,
    sort_entities,
)
from mod_deck.models.asset import Asset
from mod_deck.models.catalog import Entity


def _asset(asset_id: int, name: str, enabled: bool = True, **extra) -> Asset:
    return Asset(id=asset_id, entity_id=1, name=name, folder_name=name, is_enabled=enabled, **extra)


def _entity(entity_id: int, name: str, slug: str | None = None, count: int = 0, details=None) -> Entity:
    return Entity(
        id=entity_id,
        category_id=1,
        name=name,
        slug=slug or name.lower(),
        mod_count=count,
        details=details,
    )


def test_end_to_end_sort_orders():
    assets = [_asset(1, "Zeta", enabled=False), _asset(2, "Alpha", enabled=True)]
    assert [a.name for a in sort_assets(assets, "name-asc")] == ["Alpha", "Zeta"]
    assert [a.name for a in sort_assets(assets, "enabled-desc")] == ["Alpha", "Zeta"]
    assert [a.id for a in sort_assets(assets, "id-desc")] == [2, 1]
    assert [a.name for a in sort_assets(assets, "enabled-asc")] == ["Zeta", "Alpha"]


def test_unknown_asset_sort_falls_back_to_name_asc():
    assets = [_asset(1, "beta"), _asset(2, "Alpha")]
    assert [a.name for a in sort_assets(assets, "bogus")] == ["Alpha", "beta"]


def test_sort_is_stable_for_equal_keys():
    assets = [_asset(3, "C", True), _asset(1, "A", False), _asset(2, "B", True)]
    assert [a.id for a in sort_assets(assets, "enabled-desc")] == [3, 2, 1]


def test_search_matches_name_author_or_tags_case_insensitively():
    assets = [
        _asset(1, "Crimson Coat"),
        _asset(2, "Blue Hat", author="CRIMSONfan"),
        _asset(3, "Shoes", category_tag="Footwear, crimson"),
        _asset(4, "Gloves"),
    ]
    hits = filter_and_sort_assets(assets, search="CRIMSON", sort_key="id-asc")
    assert [a.id for a in hits] == [1, 2, 3]
    assert [a.id for a in filter_and_sort_assets(assets, search="glove")] == [4]


def test_search_term_is_matched_as_typed():
    assets = [
        _asset(1, "Crimson Coat"),
        _asset(2, "Blue Hat", author="CRIMSONfan"),
        _asset(3, "Shoes", category_tag="Footwear, crimson"),
        _asset(4, "Gloves"),
    ]
    assert [a.id for a in filter_and_sort_assets(assets, search="crimson ", sort_key="id-asc")] == [1]
    assert [a.id for a in filter_and_sort_assets(assets, search=" ", sort_key="id-asc")] == [1, 2, 3]
    assert [a.id for a in filter_and_sort_assets(assets, search="", sort_key="id-asc")] == [1, 2, 3, 4]


def test_type_filter_is_or_and_untyped_assets_never_match():
    assets = [
        _asset(1, "A", details='{"types": ["Skin"]}'),
        _asset(2, "B", details='{"types": ["Hair", "Face"]}'),
        _asset(3, "C"),
    ]
    assert [a.id for a in filter_and_sort_assets(assets, active_types={"Skin", "Face"})] == [1, 2]
    assert [a.id for a in filter_and_sort_assets(assets, active_types=set())] == [1, 2, 3]


def test_other_entities_come_first_for_every_sort_key():
    entities = [
        _entity(1, "Zhongli", count=5),
        _entity(2, "Other B", slug="b-other", count=1),
        _entity(3, "Amber", count=9),
        _entity(4, "Other A", slug="a-other", count=7),
    ]
    for key in ("name-asc", "name-desc", "count-desc", "count-asc", "unknown"):
        ordered = sort_entities(entities, key)
        assert {e.slug for e in ordered[:2]} == {"a-other", "b-other"}
    assert [e.name for e in sort_entities(entities, "count-desc")] == [
        "Other A",
        "Other B",
        "Amber",
        "Zhongli",
    ]
    # Unknown keys keep input order for regular entities and name order for others.
    assert [e.id for e in sort_entities(entities, "unknown")] == [4, 2, 1, 3]


def test_element_filter_applies_only_to_characters():
    entities = [
        _entity(1, "Diluc", details='{"element": "Pyro"}'),
        _entity(2, "Kaeya", details='{"element": "Cryo"}'),
    ]
    kept = filter_and_sort_entities(entities, category_slug="characters", element="Pyro")
    assert [e.name for e in kept] == ["Diluc"]
    kept = filter_and_sort_entities(entities, category_slug="weapons", element="Pyro")
    assert len(kept) == 2
    kept = filter_and_sort_entities(entities, category_slug="characters", element="all", search="KAE")
    assert [e.name for e in kept] == ["Kaeya"]


def test_select_all_state_rules():
    assert select_all_state(0, 0) == "unchecked"
    assert select_all_state(0, 3) == "unchecked"
    assert select_all_state(2, 3) == "indeterminate"
    assert select_all_state(3, 3) == "checked"


def test_selection_select_all_covers_visible_only_and_prunes():
    visible = [_asset(1, "A"), _asset(2, "B")]
    selection = SelectionState({9})
    selection.select_all(visible, True)
    assert selection.selected == {1, 2}
    selection.set_selected(2, False)
    assert 1 in selection and 2 not in selection
    selection.set_selected(5, True)
    selection.prune(visible)
    assert selection.selected == {1}
    selection.select_all(visible, False)
    assert len(selection) == 0
