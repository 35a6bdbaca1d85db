import json

import pytest

from mod_deck.ui.preferences import PreferenceStore


def test_defaults_when_file_missing(tmp_path):
    prefs = PreferenceStore(tmp_path / "missing" / "ui-prefs.json")
    assert prefs.view_mode() == "grid"
    assert prefs.entity_sort("diluc") == "name-asc"
    assert prefs.category_sort("characters") == "name-asc"
    assert prefs.get("anything", 5) == 5


def test_values_persist_across_instances(tmp_path):
    path = tmp_path / "cfg" / "ui-prefs.json"
    prefs = PreferenceStore(path)
    prefs.set_view_mode("list")
    prefs.set_entity_sort("diluc", "enabled-desc")
    prefs.set_category_sort("characters", "count-desc")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {
        "categorySort_characters": "count-desc",
        "entitySort_diluc": "enabled-desc",
        "entityViewMode": "list",
    }
    reopened = PreferenceStore(path)
    assert reopened.view_mode() == "list"
    assert reopened.entity_sort("diluc") == "enabled-desc"
    assert reopened.entity_sort("kaeya") == "name-asc"
    assert list(path.parent.glob(".ui-prefs-*")) == []


def test_unreadable_or_empty_values_fall_back(tmp_path):
    path = tmp_path / "ui-prefs.json"
    path.write_text("{broken", encoding="utf-8")
    assert PreferenceStore(path).view_mode() == "grid"

    path.write_text(json.dumps({"entityViewMode": "", "entitySort_x": ""}), encoding="utf-8")
    prefs = PreferenceStore(path)
    assert prefs.view_mode() == "grid"
    assert prefs.entity_sort("x") == "name-asc"

    path.write_text(json.dumps({"entityViewMode": "carousel"}), encoding="utf-8")
    assert PreferenceStore(path).view_mode() == "grid"


def test_unknown_view_mode_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        PreferenceStore(tmp_path / "p.json").set_view_mode("carousel")
