from fake_backend import connect, entity_row, rejecting

from mod_deck.ui.controllers.dashboard_controller import DashboardController
from mod_deck.ui.state import UiState


def _entities(args: dict) -> list[dict]:
    if args["categorySlug"] == "characters":
        return [entity_row(1, "Diluc", mod_count=4), entity_row(2, "Amber", mod_count=0)]
    return [entity_row(3, "Sword", mod_count=2)]


def _script(**overrides) -> dict:
    script = {
        "get_total_asset_count": 6,
        "get_categories": [
            {"id": 1, "name": "Characters", "slug": "characters"},
            {"id": 2, "name": "Weapons", "slug": "weapons"},
        ],
        "get_entities_by_category": _entities,
        "get_active_game": "zzz",
    }
    script.update(overrides)
    return script


def test_refresh_collects_stats_and_active_game():
    backend, transport = connect(_script())
    state = UiState()
    controller = DashboardController(backend=backend, state=state)
    assert controller.refresh() == (True, None)
    assert controller.total_mods == 6
    assert controller.stats is not None
    assert controller.stats.mods_by_category == {"Characters": 4, "Weapons": 2}
    assert controller.stats.entities_with_mods == 2
    assert controller.stats.top_entities[0] == ("Diluc", 4)
    assert state.banner_title == "Mod Deck - ZZZ"
    transport.close()


def test_refresh_error_keeps_previous_stats():
    backend, transport = connect(_script(get_categories=rejecting("db offline")))
    controller = DashboardController(backend=backend, state=UiState())
    ok, message = controller.refresh()
    assert not ok
    assert message == "Could not load library stats: db offline"
    assert controller.stats is None
    transport.close()


def test_active_game_failure_is_not_fatal():
    backend, transport = connect(_script(get_active_game=rejecting("unset")))
    state = UiState(active_game="genshin")
    controller = DashboardController(backend=backend, state=state)
    assert controller.refresh() == (True, None)
    assert state.active_game == "genshin"
    transport.close()
