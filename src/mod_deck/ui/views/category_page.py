"""Category page view: the entities of one category."""

from __future__ import annotations

from typing import Callable

from gi.repository import Gtk

from mod_deck.models.catalog import Entity
from mod_deck.models.constants import ENTITY_SORT_OPTIONS
from mod_deck.ui.controllers.category_controller import CategoryController
from mod_deck.ui.widgets.common import clear_children, page_title, status_label


class CategoryPage(Gtk.Box):
    def __init__(self, controller: CategoryController, on_open_entity: Callable[[str], None]) -> None:
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self._controller = controller
        self._on_open_entity = on_open_entity
        self._updating = False

        self.set_margin_top(16)
        self.set_margin_bottom(16)
        self.set_margin_start(16)
        self.set_margin_end(16)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self._title = page_title("")
        self.append(self._title)

        controls = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self.append(controls)
        self._search = Gtk.SearchEntry()
        self._search.set_placeholder_text("Search...")
        self._search.set_hexpand(True)
        self._search.connect("search-changed", self._on_search_changed)
        controls.append(self._search)

        self._sort_values = [value for value, _label in ENTITY_SORT_OPTIONS]
        self._sort = Gtk.DropDown.new_from_strings([label for _value, label in ENTITY_SORT_OPTIONS])
        self._sort.connect("notify::selected", self._on_sort_changed)
        controls.append(self._sort)

        self._elements = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=4)
        self.append(self._elements)

        self._status = status_label()
        self.append(self._status)

        scroll = Gtk.ScrolledWindow()
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        scroll.set_vexpand(True)
        self.append(scroll)
        self._flow = Gtk.FlowBox()
        self._flow.set_selection_mode(Gtk.SelectionMode.NONE)
        self._flow.set_activate_on_single_click(True)
        self._flow.set_valign(Gtk.Align.START)
        self._flow.set_max_children_per_line(6)
        self._flow.set_column_spacing(8)
        self._flow.set_row_spacing(8)
        self._flow.connect("child-activated", self._on_child_activated)
        scroll.set_child(self._flow)
        self._visible: list[Entity] = []

    def show_category(self, category_slug: str) -> None:
        self._controller.load(category_slug)
        category = self._controller.category(category_slug)
        self._title.set_label(category.name if category is not None else category_slug)
        self._updating = True
        self._search.set_text("")
        sort_key = self._controller.sort_key
        self._sort.set_selected(self._sort_values.index(sort_key) if sort_key in self._sort_values else 0)
        self._updating = False
        self._render_elements()
        self.refresh()

    def refresh(self) -> None:
        self._status.set_label(self._controller.error or "")
        clear_children(self._flow)
        self._visible = self._controller.visible_entities()
        for entity in self._visible:
            card = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=4)
            card.add_css_class("card")
            name = Gtk.Label(label=entity.name, wrap=True)
            name.add_css_class("heading")
            card.append(name)
            enabled = entity.enabled_mod_count
            counts = f"{entity.mod_count} mods" + (f", {enabled} enabled" if enabled is not None else "")
            count_label = Gtk.Label(label=counts)
            count_label.add_css_class("dim-label")
            card.append(count_label)
            self._flow.append(card)

    def _render_elements(self) -> None:
        clear_children(self._elements)
        options = self._controller.element_options()
        self._elements.set_visible(len(options) > 1)
        group: Gtk.ToggleButton | None = None
        for element in options:
            button = Gtk.ToggleButton(label=element.title())
            if group is None:
                group = button
            else:
                button.set_group(group)
            button.set_active(element == self._controller.element)
            button.connect("toggled", self._on_element_toggled, element)
            self._elements.append(button)

    def _on_search_changed(self, entry: Gtk.SearchEntry) -> None:
        if self._updating:
            return
        self._controller.set_search(entry.get_text())
        self.refresh()

    def _on_sort_changed(self, dropdown: Gtk.DropDown, _pspec) -> None:
        if self._updating:
            return
        index = dropdown.get_selected()
        if 0 <= index < len(self._sort_values):
            self._controller.set_sort(self._sort_values[index])
            self.refresh()

    def _on_element_toggled(self, button: Gtk.ToggleButton, element: str) -> None:
        if button.get_active():
            self._controller.set_element(element)
            self.refresh()

    def _on_child_activated(self, _flow: Gtk.FlowBox, child: Gtk.FlowBoxChild) -> None:
        index = child.get_index()
        if 0 <= index < len(self._visible):
            self._on_open_entity(self._visible[index].slug)
