import pytest

from mod_deck.bridge.errors import CommandRejected
from mod_deck.engine.mutations import bulk_set_enabled, drop_by_id, patch_toggled, reconcile_after
from mod_deck.models.asset import Asset


def _asset(asset_id: int, enabled: bool, folder: str | None = None) -> Asset:
    name = f"Mod{asset_id}"
    folder = folder or (name if enabled else f"DISABLED_{name}")
    return Asset(id=asset_id, entity_id=1, name=name, folder_name=folder, is_enabled=enabled)


def test_patch_toggled_updates_flag_and_folder_name():
    asset = _asset(1, True, folder="Outfits/Mod1")
    disabled = patch_toggled(asset, False)
    assert not disabled.is_enabled
    assert disabled.folder_name == "Outfits/DISABLED_Mod1"
    assert patch_toggled(disabled, True) == asset


def test_reconcile_after_always_refetches_after_success():
    calls: list[str] = []
    result, fresh = reconcile_after(
        lambda: calls.append("mutate") or "ok",
        lambda: calls.append("fetch") or [1],
        lambda _result: calls.append("patch") or [],
    )
    assert (result, fresh) == ("ok", [1])
    assert calls == ["mutate", "fetch"]


def test_reconcile_after_skips_refetch_when_mutation_fails():
    fetched: list[bool] = []

    def _fail() -> None:
        raise CommandRejected("delete_asset", "locked")

    with pytest.raises(CommandRejected):
        reconcile_after(_fail, lambda: fetched.append(True), lambda _result: fetched.append(False))
    assert fetched == []


def test_reconcile_after_patches_locally_when_refetch_fails():
    assets = [_asset(1, True), _asset(2, False)]

    def _refetch() -> list[Asset]:
        raise CommandRejected("get_assets_for_entity", "db busy")

    result, fresh = reconcile_after(lambda: None, _refetch, lambda _none: drop_by_id(assets, 1))
    assert result is None
    assert [a.id for a in fresh] == [2]


def test_bulk_enable_tallies_success_failure_and_skips():
    assets = [_asset(1, False), _asset(2, True), _asset(3, False), _asset(4, False)]
    steps: list[tuple[int, int]] = []

    def _toggle(asset: Asset) -> bool:
        if asset.id == 3:
            raise CommandRejected("toggle_asset_enabled", "file in use")
        return not asset.is_enabled

    result = bulk_set_enabled(
        assets, [1, 2, 3, 4, 99], True, _toggle, lambda done, total: steps.append((done, total))
    )

    assert (result.succeeded, result.failed, result.skipped) == (2, 1, 2)
    assert result.errors == {3: "file in use"}
    assert [a.is_enabled for a in result.assets] == [True, True, False, True]
    assert result.assets[0].folder_name == "Mod1"
    assert steps == [(1, 5), (2, 5)]
    assert result.summary() == "Bulk action completed. 2 succeeded, 1 failed."


def test_bulk_summary_when_everything_succeeds():
    assets = [_asset(1, True), _asset(2, True)]
    result = bulk_set_enabled(assets, [1, 2], False, lambda a: False)
    assert result.summary() == "Disabled 2 mods successfully!"
    assert all(a.folder_name.startswith("DISABLED_") for a in result.assets)
