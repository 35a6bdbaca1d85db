from fake_backend import FakeTransport, rejecting

from mod_deck.bridge.transport import ProcessTransport, SocketTransport
from mod_deck.config import AppConfig
from mod_deck.models.constants import SETTINGS_KEY_MODS_FOLDER, SETTINGS_KEY_QUICK_LAUNCH
from mod_deck.ui.bootstrap import bootstrap_session, transport_for


def _settings(args: dict) -> str | None:
    return {
        SETTINGS_KEY_MODS_FOLDER: "/mods",
        SETTINGS_KEY_QUICK_LAUNCH: "/games/launcher.exe",
    }.get(args["key"])


def _config(tmp_path) -> AppConfig:
    return AppConfig(
        socket_address=str(tmp_path / "backend.sock"),
        prefs_path=tmp_path / "prefs.json",
        call_timeout=2.0,
    )


def test_transport_choice_prefers_backend_command(tmp_path):
    assert isinstance(transport_for(_config(tmp_path)), SocketTransport)
    config = AppConfig(backend_command=["mod-deck-backend", "--stdio"], prefs_path=tmp_path / "p.json")
    assert isinstance(transport_for(config), ProcessTransport)


def test_bootstrap_loads_settings_and_game(tmp_path):
    transport = FakeTransport({"get_setting": _settings, "get_active_game": "genshin"})
    session, state = bootstrap_session(_config(tmp_path), transport=transport)
    assert transport.opened
    assert session.settings.is_setup_complete
    assert state.backend_connected
    assert state.banner_title == "Mod Deck - GENSHIN"

    session.close()
    assert transport.closed
    assert not state.backend_connected


def test_bootstrap_survives_failed_lookups(tmp_path):
    transport = FakeTransport(
        {"get_setting": rejecting("db locked"), "get_active_game": rejecting("unset")}
    )
    session, state = bootstrap_session(_config(tmp_path), transport=transport)
    assert session.settings.error == "Could not load application settings."
    assert not session.settings.is_setup_complete
    assert state.active_game is None
    assert state.banner_title == "Mod Deck - GAME"
    session.close()
