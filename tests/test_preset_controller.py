import threading

import pytest

from fake_backend import connect, rejecting

from mod_deck.bridge.errors import OperationFailed
from mod_deck.ui.controllers.preset_controller import BUSY_MESSAGE, PresetController


def _presets(*rows: tuple[int, str, bool]) -> list[dict]:
    return [{"id": i, "name": name, "is_favorite": fav} for i, name, fav in rows]


def _controller(handlers: dict | None = None):
    script = {"get_presets": _presets((1, "Daily", True), (2, "Event", False))}
    script.update(handlers or {})
    backend, transport = connect(script)
    return PresetController(backend=backend), transport


def test_refresh_and_favorites():
    controller, transport = _controller()
    changes: list[int] = []
    controller.on_change = lambda: changes.append(len(controller.presets))
    assert controller.refresh() == (True, None)
    assert [p.name for p in controller.favorites()] == ["Daily"]
    assert changes == [2]
    transport.close()


def test_create_trims_name_and_refetches():
    controller, transport = _controller({"create_preset": {"id": 3, "name": "Night"}})
    assert controller.create("   ") == (False, "Preset name cannot be empty.")
    assert "create_preset" not in transport.commands()

    transport.handlers["get_presets"] = _presets((1, "Daily", True), (2, "Event", False), (3, "Night", False))
    assert controller.create("  Night ") == (True, "Preset 'Night' created.")
    assert transport.last_args("create_preset") == {"name": "Night"}
    assert [p.id for p in controller.presets] == [1, 2, 3]
    assert controller.busy is None
    transport.close()


def test_create_and_delete_succeed_when_refresh_fails():
    controller, transport = _controller({"create_preset": {"id": 3, "name": "Night"}, "delete_preset": None})
    controller.refresh()
    transport.handlers["get_presets"] = rejecting("db busy")
    assert controller.create("Night") == (True, "Preset 'Night' created.")
    assert [p.id for p in controller.presets] == [1, 2, 3]
    assert controller.delete(2) == (True, "Preset deleted.")
    assert [p.id for p in controller.presets] == [1, 3]
    assert controller.busy is None
    transport.close()


def test_delete_failure_keeps_list():
    controller, transport = _controller({"delete_preset": rejecting("locked")})
    controller.refresh()
    ok, message = controller.delete(2)
    assert not ok
    assert message == "Failed to delete preset: locked"
    assert len(controller.presets) == 2
    transport.close()


def test_toggle_favorite_reverts_when_backend_refuses():
    controller, transport = _controller({"toggle_preset_favorite": rejecting("nope")})
    controller.refresh()
    ok, message = controller.toggle_favorite(2)
    assert not ok
    assert "nope" in message
    assert transport.last_args("toggle_preset_favorite") == {"presetId": 2, "isFavorite": True}
    assert not next(p for p in controller.presets if p.id == 2).is_favorite

    transport.handlers["toggle_preset_favorite"] = None
    assert controller.toggle_favorite(2) == (True, None)
    assert next(p for p in controller.presets if p.id == 2).is_favorite
    transport.close()


def test_apply_tracks_progress_and_blocks_other_actions():
    controller, transport = _controller({"apply_preset": None})
    controller.refresh()
    kinds: list[str] = []
    finished = threading.Event()

    def _on_update(update) -> None:
        kinds.append(update.kind)
        if update.is_terminal:
            finished.set()

    assert controller.apply(1, _on_update) == (True, None)
    handle = controller.apply_handle
    assert handle is not None
    assert transport.last_args("apply_preset") == {"presetId": 1, "operationId": handle.token}

    assert controller.is_busy
    assert controller.delete(2) == (False, BUSY_MESSAGE)
    assert controller.apply(2) == (False, BUSY_MESSAGE)

    transport.emit("preset://apply_start", 2, operation=handle.token)
    transport.emit("preset://apply_progress", {"processed": 1, "total": 2}, operation=handle.token)
    transport.emit("preset://apply_complete", "Preset applied.", operation=handle.token)
    assert handle.result(timeout=2) == "Preset applied."
    assert finished.wait(2)
    assert kinds == ["start", "progress", "complete"]
    assert not controller.is_busy
    transport.close()


def test_apply_rejected_at_start_fails_handle_and_frees_actions():
    controller, transport = _controller({"apply_preset": rejecting("preset missing files")})
    assert controller.apply(1) == (True, None)
    with pytest.raises(OperationFailed, match="preset missing files"):
        controller.apply_handle.result(timeout=2)
    assert not controller.is_busy
    transport.close()


def test_load_favorites_for_sidebar():
    controller, transport = _controller({"get_favorite_presets": _presets((1, "Daily", True))})
    assert controller.load_favorites() == (True, None)
    assert [p.name for p in controller.favorite_presets] == ["Daily"]

    transport.handlers["get_favorite_presets"] = rejecting("db offline")
    ok, message = controller.load_favorites()
    assert not ok
    assert message == "Could not load favorite presets: db offline"
    assert controller.favorite_presets == []
    transport.close()
