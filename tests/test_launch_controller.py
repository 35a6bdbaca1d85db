from fake_backend import connect, rejecting

from mod_deck.models.constants import SETTINGS_KEY_QUICK_LAUNCH
from mod_deck.ui.controllers.launch_controller import LaunchController
from mod_deck.ui.settings import SettingsStore


GAME = r"C:\Games\Loader\loader.exe"


def _controller(handlers: dict, path: str = GAME):
    backend, transport = connect(handlers)
    settings = SettingsStore(backend, values={SETTINGS_KEY_QUICK_LAUNCH: path}, is_loading=False)
    return LaunchController(backend=backend, settings=settings), transport


def test_launch_requires_configured_path():
    controller, transport = _controller({}, path="")
    assert controller.launch() == (False, "Quick Launch path not set in Settings.")
    assert transport.calls == []
    transport.close()


def test_plain_launch():
    controller, transport = _controller({"launch_executable": None})
    assert controller.launch() == (True, None)
    assert transport.last_args("launch_executable") == {"path": GAME}
    assert not controller.launching
    transport.close()


def test_elevation_required_retries_elevated():
    controller, transport = _controller(
        {
            "launch_executable": rejecting("The requested operation requires elevation. (os error 740)"),
            "launch_executable_elevated": None,
        }
    )
    assert controller.launch() == (True, None)
    assert transport.commands() == ["launch_executable", "launch_executable_elevated"]
    transport.close()


def test_elevated_launch_cancel_and_failure_messages():
    controller, transport = _controller(
        {
            "launch_executable": rejecting("requires administrator privileges"),
            "launch_executable_elevated": rejecting("Operation cancelled by user"),
        }
    )
    assert controller.launch() == (False, "Admin launch cancelled by user.")
    transport.handlers["launch_executable_elevated"] = rejecting("ShellExecute returned 2")
    assert controller.launch() == (False, "Elevated launch failed: ShellExecute returned 2")
    transport.close()


def test_other_launch_errors_are_reported_directly():
    controller, transport = _controller({"launch_executable": rejecting("file missing")})
    assert controller.launch() == (False, "Launch Failed: file missing")
    assert "launch_executable_elevated" not in transport.commands()
    transport.close()


def test_concurrent_launch_is_refused():
    controller, transport = _controller({"launch_executable": None})
    controller.launching = True
    assert controller.launch() == (False, "Launch already in progress.")
    transport.close()
