"""Controller for the home dashboard."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError
from mod_deck.engine.stats import LibraryStats, library_stats
from mod_deck.models.catalog import Category, Entity
from mod_deck.ui.state import UiState


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardController:
    backend: ModBackend
    state: UiState
    total_mods: int | None = None
    stats: LibraryStats | None = None
    error: str | None = None

    def refresh(self) -> tuple[bool, str | None]:
        """Reload the mod total, per-category stats and the active game name."""
        self.error = None
        try:
            self.total_mods = self.backend.get_total_asset_count()
            by_category: dict[Category, list[Entity]] = {}
            for category in self.backend.get_categories():
                by_category[category] = self.backend.get_entities_by_category(category.slug)
        except BackendError as exc:
            self.error = f"Could not load library stats: {exc}"
            return False, self.error
        self.stats = library_stats(by_category)
        try:
            self.state.active_game = self.backend.get_active_game()
        except BackendError as exc:
            logger.warning("Failed to fetch active game: %s", exc)
        return True, None
