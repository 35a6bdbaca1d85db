"""Mutate-then-reconcile helpers shared by every screen.

Most mutations refetch canonical state afterwards. Toggling is the one
high-frequency path patched in place, using the folder-name rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Iterable, TypeVar

from mod_deck.bridge.errors import BackendError
from mod_deck.engine.folder_names import with_enabled_state
from mod_deck.models.asset import Asset


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
Row = TypeVar("Row")


def reconcile_after(
    mutation: Callable[[], R],
    refetch: Callable[[], T],
    fallback: Callable[[R], T],
) -> tuple[R, T]:
    """Run ``mutation`` and then fetch fresh state.

    Errors from the mutation propagate without a refetch; the caller's
    local state is left untouched in that case. Once the mutation has
    succeeded a failed refetch is logged and ``fallback(result)`` patches
    the local state instead, so the mutation is still reported as done.
    """
    result = mutation()
    try:
        fresh = refetch()
    except BackendError as exc:
        logger.warning("Refresh after a successful change failed, patching locally: %s", exc)
        fresh = fallback(result)
    return result, fresh


def drop_by_id(rows: Iterable[Row], row_id: int) -> list[Row]:
    return [row for row in rows if row.id != row_id]


def patch_toggled(asset: Asset, is_enabled: bool) -> Asset:
    return asset.with_changes(
        is_enabled=is_enabled,
        folder_name=with_enabled_state(asset.folder_name, is_enabled),
    )


def replace_asset(assets: Iterable[Asset], updated: Asset) -> list[Asset]:
    return [updated if a.id == updated.id else a for a in assets]


@dataclass(slots=True)
class BulkResult:
    enable: bool
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    assets: list[Asset] = field(default_factory=list)
    errors: dict[int, str] = field(default_factory=dict)

    def summary(self) -> str:
        if self.failed == 0:
            verb = "Enabled" if self.enable else "Disabled"
            return f"{verb} {self.succeeded} mods successfully!"
        return f"Bulk action completed. {self.succeeded} succeeded, {self.failed} failed."


def bulk_set_enabled(
    assets: Iterable[Asset],
    selected_ids: Iterable[int],
    enable: bool,
    toggle: Callable[[Asset], bool],
    on_step: Callable[[int, int], None] | None = None,
) -> BulkResult:
    """Bring every selected asset to ``enable``, one toggle at a time.

    ``toggle`` flips one asset on the backend and returns its new state.
    Per-item failures are tallied; the batch never stops early.
    """
    by_id = {a.id: a for a in assets}
    order = list(by_id)
    ids = list(dict.fromkeys(selected_ids))
    result = BulkResult(enable=enable)

    for asset_id in ids:
        current = by_id.get(asset_id)
        if current is None or current.is_enabled == enable:
            result.skipped += 1
            continue
        try:
            new_state = toggle(current)
        except BackendError as exc:
            result.failed += 1
            result.errors[asset_id] = str(exc)
            logger.warning("Bulk toggle failed for asset %s: %s", asset_id, exc)
            continue
        by_id[asset_id] = patch_toggled(current, new_state)
        result.succeeded += 1
        if on_step is not None:
            on_step(result.succeeded, len(ids))

    result.assets = [by_id[i] for i in order]
    return result
