"""Controller for the sidebar categories and the category (entity grid) page."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable

from mod_deck.bridge.api import ModBackend
from mod_deck.bridge.errors import BackendError
from mod_deck.engine.listing import ENTITY_SORT_KEYS, filter_and_sort_entities
from mod_deck.models.catalog import Category, Entity
from mod_deck.models.constants import (
    DEFAULT_ENTITY_SORT,
    ELEMENT_FILTER_CATEGORY,
    ELEMENT_FILTERS,
)
from mod_deck.ui.preferences import PreferenceStore
from mod_deck.ui.state import UiState


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CategoryController:
    """Owns category navigation and entity browsing."""

    backend: ModBackend
    prefs: PreferenceStore
    state: UiState
    categories: list[Category] = field(default_factory=list)
    category_slug: str = ""
    entities: list[Entity] = field(default_factory=list)
    search: str = ""
    element: str = "all"
    sort_key: str = DEFAULT_ENTITY_SORT
    error: str | None = None
    on_change: Callable[[], None] | None = None

    def load_categories(self) -> tuple[bool, str | None]:
        try:
            self.categories = self.backend.get_categories()
        except BackendError as exc:
            self.categories = []
            return False, f"Could not load categories: {exc}"
        return True, None

    def category(self, slug: str) -> Category | None:
        for category in self.categories:
            if category.slug == slug:
                return category
        return None

    def load(self, category_slug: str) -> tuple[bool, str | None]:
        """Fetch the category's entities; search and element filter reset."""
        self.category_slug = category_slug
        self.state.current_category = category_slug
        self.search = ""
        self.element = "all"
        self.sort_key = self.prefs.category_sort(category_slug)
        self.error = None
        try:
            self.entities = self.backend.get_entities_by_category(category_slug)
        except BackendError as exc:
            self.entities = []
            self.error = f"Could not load {category_slug}: {exc}"
        self._notify_changed()
        return self.error is None, self.error

    @property
    def shows_element_filter(self) -> bool:
        return self.category_slug == ELEMENT_FILTER_CATEGORY

    def element_options(self) -> tuple[str, ...]:
        return ELEMENT_FILTERS if self.shows_element_filter else ("all",)

    def visible_entities(self) -> list[Entity]:
        return filter_and_sort_entities(
            self.entities,
            category_slug=self.category_slug,
            search=self.search,
            element=self.element,
            sort_key=self.sort_key,
        )

    def set_search(self, term: str) -> None:
        self.search = term

    def set_element(self, element: str) -> None:
        self.element = element if element in ELEMENT_FILTERS else "all"

    def set_sort(self, sort_key: str) -> None:
        if sort_key not in ENTITY_SORT_KEYS:
            sort_key = DEFAULT_ENTITY_SORT
        self.sort_key = sort_key
        if self.category_slug:
            self.prefs.set_category_sort(self.category_slug, sort_key)

    def _notify_changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
