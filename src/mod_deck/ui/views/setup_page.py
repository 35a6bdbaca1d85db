"""First-run setup: both paths must be chosen before the main UI opens."""

from __future__ import annotations

from typing import Callable

from gi.repository import Adw, Gtk

from mod_deck.ui.controllers.settings_controller import SettingsController
from mod_deck.ui.widgets.common import status_label


class SetupPage(Gtk.Box):
    def __init__(self, controller: SettingsController, on_complete: Callable[[], None]) -> None:
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self._controller = controller
        self._on_complete = on_complete
        self.set_margin_top(32)
        self.set_margin_bottom(32)
        self.set_margin_start(32)
        self.set_margin_end(32)
        self.set_valign(Gtk.Align.CENTER)

        status = Adw.StatusPage(
            title="Welcome to Mod Deck",
            description="Choose your mods folder and the game launcher to get started.",
            icon_name="applications-games-symbolic",
        )
        self.append(status)

        group = Adw.PreferencesGroup()
        self.append(group)
        self._mods_row = Adw.ActionRow(title="Mods folder")
        mods_button = Gtk.Button(label="Browse...")
        mods_button.set_valign(Gtk.Align.CENTER)
        mods_button.connect("clicked", self._on_choose_mods)
        self._mods_row.add_suffix(mods_button)
        group.add(self._mods_row)

        self._launch_row = Adw.ActionRow(title="Quick Launch executable")
        launch_button = Gtk.Button(label="Browse...")
        launch_button.set_valign(Gtk.Align.CENTER)
        launch_button.connect("clicked", self._on_choose_launch)
        self._launch_row.add_suffix(launch_button)
        group.add(self._launch_row)

        self._status = status_label()
        self.append(self._status)

        self._continue = Gtk.Button(label="Continue")
        self._continue.add_css_class("suggested-action")
        self._continue.add_css_class("pill")
        self._continue.set_halign(Gtk.Align.CENTER)
        self._continue.connect("clicked", lambda *_: self._on_complete())
        self.append(self._continue)
        self.refresh()

    def refresh(self) -> None:
        settings = self._controller.settings
        self._mods_row.set_subtitle(settings.mods_folder or "Not set")
        self._launch_row.set_subtitle(settings.quick_launch_path or "Not set")
        self._status.set_label(settings.error or "")
        self._continue.set_sensitive(settings.is_setup_complete)

    def _apply(self, outcome: tuple[bool, str | None]) -> None:
        _ok, message = outcome
        self.refresh()
        if message:
            self._status.set_label(message)

    def _on_choose_mods(self, _button: Gtk.Button) -> None:
        self._apply(self._controller.choose_mods_folder())

    def _on_choose_launch(self, _button: Gtk.Button) -> None:
        self._apply(self._controller.choose_quick_launch())
