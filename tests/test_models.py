from mod_deck.models.archive import ArchiveAnalysis, is_archive_path
from mod_deck.models.asset import Asset
from mod_deck.models.catalog import Entity
from mod_deck.models.progress import ProgressUpdate


def _analysis(**extra) -> ArchiveAnalysis:
    data = {"file_path": "C:\\Downloads\\Cool Mod.7z", "entries": []}
    data.update(extra)
    return ArchiveAnalysis.from_json(data)


def test_entity_details_tolerate_malformed_json():
    entity = Entity.from_json({"id": 1, "name": "A", "slug": "a", "details": "{oops"})
    assert entity.detail_fields() == {}
    assert entity.types() == []
    assert entity.mod_count == 0
    assert entity.enabled_mod_count is None


def test_other_entities_are_recognised_by_slug_suffix():
    assert Entity(id=1, category_id=1, name="Other", slug="characters-other").is_other
    assert not Entity(id=2, category_id=1, name="Otherworldly", slug="otherworldly").is_other


def test_asset_tags_and_types():
    asset = Asset.from_json(
        {
            "id": 1,
            "name": "A",
            "folder_name": "A",
            "is_enabled": True,
            "category_tag": "Outfit, , Hair ",
            "details": '{"types": ["Skin", "Hair"]}',
        }
    )
    assert asset.tags() == ["Outfit", "Hair"]
    assert asset.types() == ["Skin", "Hair"]
    assert Asset.from_json({"id": 2, "name": "B"}).types() is None


def test_archive_defaults_prefer_deduced_then_basename():
    assert _analysis(deduced_mod_name="Deduced").default_mod_name() == "Deduced"
    assert _analysis().default_mod_name() == "Cool Mod"
    assert _analysis().archive_name == "Cool Mod.7z"


def test_archive_default_root_prefers_likely_root_then_first_directory():
    entries = [
        {"path": "readme.txt", "is_dir": False},
        {"path": "Wrapper/", "is_dir": True},
        {"path": "Wrapper/Mod/", "is_dir": True, "is_likely_mod_root": True},
    ]
    assert _analysis(entries=entries).default_internal_root() == "Wrapper/Mod/"
    assert _analysis(entries=entries[:2]).default_internal_root() == "Wrapper/"
    assert _analysis(entries=entries[:1]).default_internal_root() == ""
    assert not _analysis(entries=entries[:1]).has_directories


def test_archive_extension_check_is_case_insensitive():
    assert is_archive_path("/x/MOD.ZIP")
    assert is_archive_path("/x/mod.rar")
    assert not is_archive_path("/x/mod.tar.gz")


def test_progress_fraction_and_percent():
    assert ProgressUpdate(processed=1, total=3).percent == 33
    assert ProgressUpdate(processed=5, total=0).fraction == 0.0
    assert ProgressUpdate.from_json("Working").message == "Working"
    assert ProgressUpdate.starting(10).label() == "0 / 10"
