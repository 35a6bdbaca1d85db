from pathlib import Path

import pytest

from mod_deck.config import DEFAULT_CALL_TIMEOUT, AppConfig


def test_defaults_use_socket_and_xdg_paths(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path / "run"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    config = AppConfig.from_env({})
    assert config.backend_command is None
    assert config.socket_address == str(tmp_path / "run" / "mod-deck.sock")
    assert config.prefs_path == tmp_path / "cfg" / "mod-deck" / "ui-prefs.json"
    assert config.call_timeout == DEFAULT_CALL_TIMEOUT
    assert config.log_level == "INFO"


def test_env_overrides():
    config = AppConfig.from_env(
        {
            "MOD_DECK_BACKEND": "mod-backend --stdio --data 'My Dir'",
            "MOD_DECK_PREFS": "/tmp/prefs.json",
            "MOD_DECK_CALL_TIMEOUT": "0",
            "MOD_DECK_LOG_LEVEL": "debug",
        }
    )
    assert config.backend_command == ["mod-backend", "--stdio", "--data", "My Dir"]
    assert config.socket_address is None
    assert config.prefs_path == Path("/tmp/prefs.json")
    assert config.call_timeout is None
    assert config.log_level == "DEBUG"


def test_tcp_socket_address_passes_through():
    config = AppConfig.from_env({"MOD_DECK_SOCKET": "tcp://127.0.0.1:4820"})
    assert config.socket_address == "tcp://127.0.0.1:4820"


@pytest.mark.parametrize(
    "env, variable",
    [
        ({"MOD_DECK_CALL_TIMEOUT": "soon"}, "MOD_DECK_CALL_TIMEOUT"),
        ({"MOD_DECK_CALL_TIMEOUT": "-1"}, "MOD_DECK_CALL_TIMEOUT"),
        ({"MOD_DECK_LOG_LEVEL": "LOUD"}, "MOD_DECK_LOG_LEVEL"),
    ],
)
def test_invalid_values_name_the_variable(env, variable):
    with pytest.raises(ValueError, match=variable):
        AppConfig.from_env(env)
