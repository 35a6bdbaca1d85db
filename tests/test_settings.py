from fake_backend import connect, rejecting

from mod_deck.ui.settings import LOAD_ERROR, SettingsStore


def _settings(values: dict[str, str | None]):
    backend, transport = connect({"get_setting": lambda args: values.get(args["key"])})
    return SettingsStore(backend), transport


def test_setup_incomplete_until_loaded():
    store, transport = _settings({"mods_folder_path": "/mods", "quick_launch_path": "/game.exe"})
    assert store.is_loading
    assert not store.is_setup_complete
    assert store.load()
    assert store.is_setup_complete
    assert store.custom_url == ""
    transport.close()


def test_setup_requires_both_paths():
    store, transport = _settings({"mods_folder_path": "/mods", "quick_launch_path": None})
    store.load()
    assert store.mods_folder == "/mods"
    assert store.quick_launch_path == ""
    assert not store.is_setup_complete
    transport.close()


def test_load_failure_yields_empty_values_and_error():
    backend, transport = connect({"get_setting": rejecting("db locked")})
    store = SettingsStore(backend)
    assert not store.load()
    assert store.error == LOAD_ERROR
    assert not store.is_loading
    assert store.mods_folder == ""
    assert not store.is_setup_complete
    transport.close()


def test_update_writes_through_and_caches_only_on_success():
    store, transport = _settings({})
    transport.handlers["set_setting"] = None
    store.load()
    assert store.update("custom_url", "https://example.test") == (True, None)
    assert transport.last_args("set_setting") == {"key": "custom_url", "value": "https://example.test"}
    assert store.custom_url == "https://example.test"

    transport.handlers["set_setting"] = rejecting("read-only")
    ok, message = store.update("custom_url", "https://other.test")
    assert not ok
    assert "custom_url" in message
    assert store.custom_url == "https://example.test"
    transport.close()
