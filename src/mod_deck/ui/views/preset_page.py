"""Preset page view."""

from __future__ import annotations

from typing import Callable

from gi.repository import Adw, Gtk

from mod_deck.bridge.events import OperationUpdate
from mod_deck.models.preset import Preset
from mod_deck.ui.controllers.preset_controller import PresetController
from mod_deck.ui.widgets.common import (
    clear_children,
    confirm,
    page_title,
    parent_window,
    status_label,
)
from mod_deck.ui.widgets.progress_dialog import OperationProgressDialog


class PresetPage(Gtk.Box):
    """Preset list with create, apply, overwrite, favorite and delete."""

    def __init__(
        self,
        controller: PresetController,
        notify: Callable[[str], None],
        on_applied: Callable[[], None],
    ) -> None:
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self._controller = controller
        self._notify = notify
        self._on_applied = on_applied

        self.set_margin_top(16)
        self.set_margin_bottom(16)
        self.set_margin_start(16)
        self.set_margin_end(16)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self.append(page_title("Presets"))

        create_row = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self._name = Gtk.Entry()
        self._name.set_placeholder_text("New preset name")
        self._name.set_hexpand(True)
        self._name.connect("activate", self._on_create)
        create_row.append(self._name)
        create = Gtk.Button(label="Save current mods as preset")
        create.add_css_class("suggested-action")
        create.connect("clicked", self._on_create)
        create_row.append(create)
        self.append(create_row)

        self._status = status_label()
        self.append(self._status)

        scroll = Gtk.ScrolledWindow()
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        scroll.set_vexpand(True)
        self.append(scroll)
        self._list = Gtk.ListBox()
        self._list.add_css_class("boxed-list")
        self._list.set_selection_mode(Gtk.SelectionMode.NONE)
        scroll.set_child(self._list)

    def reload(self) -> None:
        self._controller.refresh()
        self.refresh()

    def refresh(self) -> None:
        self._status.set_label(self._controller.error or "")
        clear_children(self._list)
        for preset in self._controller.presets:
            self._list.append(self._row(preset))

    def _row(self, preset: Preset) -> Adw.ActionRow:
        row = Adw.ActionRow(title=preset.name)
        star = Gtk.ToggleButton()
        star.set_icon_name("starred-symbolic" if preset.is_favorite else "non-starred-symbolic")
        star.set_active(preset.is_favorite)
        star.set_valign(Gtk.Align.CENTER)
        star.add_css_class("flat")
        star.connect("clicked", lambda *_: self._run(self._controller.toggle_favorite(preset.id)))
        row.add_prefix(star)

        for label, handler in (
            ("Apply", lambda *_: self.apply(preset)),
            ("Overwrite", lambda *_: self._on_overwrite(preset)),
            ("Delete", lambda *_: self._on_delete(preset)),
        ):
            button = Gtk.Button(label=label)
            button.set_valign(Gtk.Align.CENTER)
            button.connect("clicked", handler)
            row.add_suffix(button)
        return row

    def _run(self, outcome: tuple[bool, str | None]) -> None:
        ok, message = outcome
        if message and ok:
            self._notify(message)
        elif message:
            self._status.set_label(message)
        self.refresh()

    def _on_create(self, *_args) -> None:
        ok, message = self._controller.create(self._name.get_text())
        if ok:
            self._name.set_text("")
        self._run((ok, message))

    def _on_overwrite(self, preset: Preset) -> None:
        confirm(
            self,
            "Overwrite preset?",
            f"'{preset.name}' will be replaced with the currently enabled mods.",
            lambda: self._run(self._controller.overwrite(preset.id)),
            confirm_label="Overwrite",
        )

    def _on_delete(self, preset: Preset) -> None:
        confirm(
            self,
            "Delete preset?",
            f"'{preset.name}' will be deleted. Your mods are not affected.",
            lambda: self._run(self._controller.delete(preset.id)),
            confirm_label="Delete",
        )

    def apply(self, preset: Preset) -> None:
        """Start applying ``preset`` behind a progress window."""
        ok, message = self._controller.apply(preset.id)
        handle = self._controller.apply_handle
        if not ok or handle is None:
            self._notify(message or "Could not apply preset.")
            return
        OperationProgressDialog(
            parent_window(self),
            f"Applying '{preset.name}'",
            handle,
            on_finished=self._on_apply_finished,
        ).present()

    def _on_apply_finished(self, update: OperationUpdate) -> None:
        self._notify(update.message)
        if update.kind == "complete":
            self._on_applied()
