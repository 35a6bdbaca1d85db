"""Entity page view: one character/object and its mods."""

from __future__ import annotations

from typing import Callable

from gi.repository import Adw, Gtk

from mod_deck.models.asset import Asset
from mod_deck.models.constants import ASSET_SORT_OPTIONS
from mod_deck.models.preset import Preset
from mod_deck.ui.controllers.entity_controller import EntityController
from mod_deck.ui.widgets.common import (
    clear_children,
    confirm,
    on_ui_thread,
    page_title,
    run_in_background,
    status_label,
)
from mod_deck.ui.widgets.mod_card import ModCard
from mod_deck.ui.widgets.mod_dialogs import (
    open_add_to_presets_dialog,
    open_edit_dialog,
    open_keybinds_dialog,
)


class EntityPage(Gtk.Box):
    """Mod browser with search, type filters, sort, selection and bulk actions."""

    def __init__(
        self,
        controller: EntityController,
        notify: Callable[[str], None],
        list_presets: Callable[[], list[Preset]],
        choose_image: Callable[[], str | None],
    ) -> None:
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self._controller = controller
        self._notify = notify
        self._list_presets = list_presets
        self._choose_image = choose_image
        self._updating = False

        self.set_margin_top(16)
        self.set_margin_bottom(16)
        self.set_margin_start(16)
        self.set_margin_end(16)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self._title = page_title("")
        self.append(self._title)
        self._subtitle = Gtk.Label(xalign=0, wrap=True)
        self._subtitle.add_css_class("dim-label")
        self.append(self._subtitle)

        controls = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self.append(controls)

        self._search = Gtk.SearchEntry()
        self._search.set_placeholder_text("Search mods...")
        self._search.set_hexpand(True)
        self._search.connect("search-changed", self._on_search_changed)
        controls.append(self._search)

        self._sort_values = [value for value, _label in ASSET_SORT_OPTIONS]
        self._sort = Gtk.DropDown.new_from_strings([label for _value, label in ASSET_SORT_OPTIONS])
        self._sort.connect("notify::selected", self._on_sort_changed)
        controls.append(self._sort)

        self._list_toggle = Gtk.ToggleButton(label="List")
        self._list_toggle.connect("toggled", self._on_view_mode_toggled)
        controls.append(self._list_toggle)

        self._types_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=6)
        self.append(self._types_box)

        bulk = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self.append(bulk)
        self._select_all = Gtk.CheckButton(label="Select all")
        self._select_all.connect("toggled", self._on_select_all)
        bulk.append(self._select_all)
        self._selected_label = Gtk.Label(xalign=0)
        self._selected_label.set_hexpand(True)
        bulk.append(self._selected_label)
        self._enable_button = Gtk.Button(label="Enable selected")
        self._enable_button.connect("clicked", lambda *_: self._on_bulk(True))
        bulk.append(self._enable_button)
        self._disable_button = Gtk.Button(label="Disable selected")
        self._disable_button.connect("clicked", lambda *_: self._on_bulk(False))
        bulk.append(self._disable_button)

        self._status = status_label()
        self.append(self._status)

        scroll = Gtk.ScrolledWindow()
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        scroll.set_vexpand(True)
        self.append(scroll)

        self._flow = Gtk.FlowBox()
        self._flow.set_selection_mode(Gtk.SelectionMode.NONE)
        self._flow.set_valign(Gtk.Align.START)
        self._flow.set_column_spacing(8)
        self._flow.set_row_spacing(8)
        scroll.set_child(self._flow)

        self._empty = Adw.StatusPage(title="No mods found", icon_name="folder-symbolic")
        self._empty.set_visible(False)
        self.append(self._empty)

    # -- loading --------------------------------------------------------------

    def show_entity(self, entity_slug: str) -> None:
        self._controller.load(entity_slug)
        self._updating = True
        self._search.set_text("")
        self._sort.set_selected(self._sort_index(self._controller.sort_key))
        self._list_toggle.set_active(self._controller.view_mode() == "list")
        self._updating = False
        self._render_type_filters()
        self.refresh()

    def refresh(self) -> None:
        controller = self._controller
        entity = controller.entity
        self._status.set_label(controller.error or "")
        if entity is None:
            self._title.set_label(controller.entity_slug)
            self._subtitle.set_label("")
        else:
            self._title.set_label(entity.name)
            enabled = controller.enabled_count()
            self._subtitle.set_label(
                f"{len(controller.assets)} mods installed, {enabled} enabled"
                + (f"  -  {entity.description}" if entity.description else "")
            )
        self._render_assets()

    def _sort_index(self, sort_key: str) -> int:
        return self._sort_values.index(sort_key) if sort_key in self._sort_values else 0

    def _render_type_filters(self) -> None:
        clear_children(self._types_box)
        for type_name in self._controller.available_types():
            toggle = Gtk.ToggleButton(label=type_name)
            toggle.add_css_class("pill")
            toggle.connect("toggled", self._on_type_toggled, type_name)
            self._types_box.append(toggle)

    def _render_assets(self) -> None:
        clear_children(self._flow)
        controller = self._controller
        compact = controller.view_mode() == "list"
        self._flow.set_max_children_per_line(1 if compact else 4)
        self._flow.set_min_children_per_line(1)
        visible = controller.visible_assets()
        for asset in visible:
            self._flow.append(
                ModCard(
                    asset,
                    selected=asset.id in controller.selection,
                    compact=compact,
                    image_path=None if compact else controller.image_path(asset),
                    on_toggle=self._on_toggle,
                    on_select=self._on_select,
                    on_action=self._on_action,
                )
            )
        self._empty.set_visible(not visible and controller.entity is not None)
        self._sync_selection_controls()

    def _sync_selection_controls(self) -> None:
        state = self._controller.select_all_state()
        self._updating = True
        self._select_all.set_inconsistent(state == "indeterminate")
        self._select_all.set_active(state == "checked")
        self._updating = False
        count = len(self._controller.selection)
        self._selected_label.set_label(f"{count} selected" if count else "")
        busy = self._controller.bulk_running
        self._enable_button.set_sensitive(bool(count) and not busy)
        self._disable_button.set_sensitive(bool(count) and not busy)

    # -- handlers -------------------------------------------------------------

    def _on_search_changed(self, entry: Gtk.SearchEntry) -> None:
        if self._updating:
            return
        self._controller.set_search(entry.get_text())
        self._render_assets()

    def _on_sort_changed(self, dropdown: Gtk.DropDown, _pspec) -> None:
        if self._updating:
            return
        index = dropdown.get_selected()
        if 0 <= index < len(self._sort_values):
            self._controller.set_sort(self._sort_values[index])
            self._render_assets()

    def _on_view_mode_toggled(self, button: Gtk.ToggleButton) -> None:
        if self._updating:
            return
        self._controller.set_view_mode("list" if button.get_active() else "grid")
        self._render_assets()

    def _on_type_toggled(self, button: Gtk.ToggleButton, type_name: str) -> None:
        self._controller.set_type_active(type_name, button.get_active())
        self._render_assets()

    def _on_select_all(self, button: Gtk.CheckButton) -> None:
        if self._updating:
            return
        self._controller.select_all(button.get_active())
        self._render_assets()

    def _on_select(self, asset: Asset, selected: bool) -> None:
        self._controller.set_selected(asset.id, selected)
        self._sync_selection_controls()

    def _on_toggle(self, asset: Asset) -> None:
        ok, message = self._controller.toggle(asset.id)
        if not ok and message:
            self._notify(message)
        self.refresh()

    def _on_bulk(self, enable: bool) -> None:
        if self._controller.bulk_running:
            return
        self._enable_button.set_sensitive(False)
        self._disable_button.set_sensitive(False)
        self._select_all.set_sensitive(False)
        verb = "Enabling" if enable else "Disabling"
        self._selected_label.set_label(f"{verb} mods...")
        on_step = on_ui_thread(
            lambda done, total: self._selected_label.set_label(f"{verb} mod {done}/{total}...")
        )
        run_in_background(
            lambda: self._controller.bulk_set_enabled(enable, on_step=on_step),
            self._on_bulk_finished,
        )

    def _on_bulk_finished(self, outcome: tuple[bool, str | None]) -> None:
        _ok, message = outcome
        self._select_all.set_sensitive(True)
        if message:
            self._notify(message)
        self.refresh()

    def _on_action(self, action: str, asset: Asset) -> None:
        controller = self._controller
        if action == "edit":
            open_edit_dialog(self, asset, lambda values: self._save(asset, values), self._choose_image)
        elif action == "delete":
            confirm(
                self,
                "Delete mod?",
                f"'{asset.name}' will be removed from disk. This cannot be undone.",
                lambda: self._delete(asset),
                confirm_label="Delete",
            )
        elif action == "keybinds":
            keybinds, message = controller.keybinds(asset.id)
            if message:
                self._notify(message)
            else:
                open_keybinds_dialog(self, asset, keybinds)
        elif action == "folder":
            ok, message = controller.open_folder(asset.id)
            if not ok and message:
                self._notify(message)
        elif action == "presets":
            open_add_to_presets_dialog(
                self,
                asset,
                self._list_presets(),
                lambda ids: self._report(*controller.add_to_presets(asset.id, ids)),
            )

    def _save(self, asset: Asset, values: dict) -> None:
        ok, message = self._controller.save_details(asset.id, **values)
        self._report(ok, message)
        self.refresh()

    def _delete(self, asset: Asset) -> None:
        ok, message = self._controller.delete(asset.id)
        self._report(ok, message or f"Deleted '{asset.name}'.")
        self.refresh()

    def _report(self, _ok: bool, message: str | None) -> None:
        if message:
            self._notify(message)
