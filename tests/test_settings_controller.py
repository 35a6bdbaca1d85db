import pytest

from fake_backend import connect, rejecting

from mod_deck.bridge.errors import OperationFailed
from mod_deck.models.constants import SETTINGS_KEY_CUSTOM_URL, SETTINGS_KEY_MODS_FOLDER
from mod_deck.ui.controllers.settings_controller import SettingsController
from mod_deck.ui.settings import SettingsStore


def _controller(handlers: dict, mods_folder: str = "/mods"):
    script = {"set_setting": None}
    script.update(handlers)
    backend, transport = connect(script)
    settings = SettingsStore(backend, values={SETTINGS_KEY_MODS_FOLDER: mods_folder}, is_loading=False)
    return SettingsController(backend=backend, settings=settings), transport


def test_choose_mods_folder_saves_selection():
    controller, transport = _controller({"select_directory": "/data/mods"})
    assert controller.choose_mods_folder() == (True, None)
    assert transport.last_args("set_setting") == {"key": SETTINGS_KEY_MODS_FOLDER, "value": "/data/mods"}
    assert controller.settings.mods_folder == "/data/mods"
    transport.close()


def test_cancelled_dialog_changes_nothing():
    controller, transport = _controller({"select_file": None})
    assert controller.choose_quick_launch() == (False, None)
    assert "set_setting" not in transport.commands()
    transport.close()


def test_custom_url_is_trimmed():
    controller, transport = _controller({})
    assert controller.save_custom_url("  https://example.org/mods  ")[0]
    assert controller.settings.get(SETTINGS_KEY_CUSTOM_URL) == "https://example.org/mods"
    transport.close()


def test_open_mods_folder_needs_path():
    controller, transport = _controller({"open_mods_folder": None}, mods_folder="")
    assert controller.open_mods_folder() == (False, "Mods folder path not set in Settings.")
    transport.close()


def test_scan_needs_mods_folder():
    controller, transport = _controller({}, mods_folder="")
    assert controller.scan() == (False, "Please set the mods folder first.")
    transport.close()


def test_scan_runs_to_completion_and_refuses_overlap():
    controller, transport = _controller({"scan_mods_directory": None})
    assert controller.scan() == (True, None)
    handle = controller.scan_handle
    assert handle is not None
    assert controller.is_scanning
    assert controller.scan() == (False, "A scan is already running.")

    transport.emit("scan://start", 3)
    transport.emit("scan://complete", "Scan complete.")
    assert handle.result(timeout=2) == "Scan complete."
    assert not controller.is_scanning
    transport.close()


def test_scan_rejected_by_backend_fails_handle():
    controller, transport = _controller({"scan_mods_directory": rejecting("mods folder missing")})
    assert controller.scan() == (True, None)
    with pytest.raises(OperationFailed, match="mods folder missing"):
        controller.scan_handle.result(timeout=2)
    assert not controller.is_scanning
    transport.close()


def test_scan_on_closed_bridge_reports_error():
    controller, _transport = _controller({"scan_mods_directory": None})
    controller.backend.client.close()
    assert controller.scan() == (False, "Failed to start scan: Backend connection closed")
    assert controller.scan_handle is None
