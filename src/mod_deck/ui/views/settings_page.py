"""Settings page view."""

from __future__ import annotations

from typing import Callable

from gi.repository import Adw, Gtk

from mod_deck.bridge.events import OperationUpdate
from mod_deck.ui.controllers.settings_controller import SettingsController
from mod_deck.ui.widgets.common import parent_window, status_label
from mod_deck.ui.widgets.progress_dialog import OperationProgressDialog


class SettingsPage(Adw.PreferencesPage):
    """Paths, custom link and library scan."""

    def __init__(
        self,
        controller: SettingsController,
        notify: Callable[[str], None],
        on_scanned: Callable[[], None],
    ) -> None:
        super().__init__()
        self._controller = controller
        self._notify = notify
        self._on_scanned = on_scanned

        paths = Adw.PreferencesGroup(title="Paths")
        self.add(paths)
        self._mods_row = Adw.ActionRow(title="Mods folder")
        self._mods_row.add_suffix(self._button("Browse...", self._on_choose_mods))
        self._mods_row.add_suffix(self._button("Open", self._on_open_mods))
        paths.add(self._mods_row)
        self._launch_row = Adw.ActionRow(title="Quick Launch executable")
        self._launch_row.add_suffix(self._button("Browse...", self._on_choose_launch))
        paths.add(self._launch_row)

        links = Adw.PreferencesGroup(title="Links")
        self.add(links)
        self._url_row = Adw.EntryRow(title="Custom URL")
        self._url_row.set_show_apply_button(True)
        self._url_row.connect("apply", self._on_url_apply)
        links.add(self._url_row)

        library = Adw.PreferencesGroup(
            title="Library",
            description="Scan the mods folder and sync the database with what is on disk.",
        )
        self.add(library)
        scan_row = Adw.ActionRow(title="Scan mods folder")
        self._scan_button = self._button("Scan", self._on_scan)
        scan_row.add_suffix(self._scan_button)
        library.add(scan_row)

        self._status = status_label()
        status_group = Adw.PreferencesGroup()
        status_group.add(self._status)
        self.add(status_group)

    @staticmethod
    def _button(label: str, handler: Callable[[Gtk.Button], None]) -> Gtk.Button:
        button = Gtk.Button(label=label)
        button.set_valign(Gtk.Align.CENTER)
        button.connect("clicked", handler)
        return button

    def refresh(self) -> None:
        settings = self._controller.settings
        self._mods_row.set_subtitle(settings.mods_folder or "Not set")
        self._launch_row.set_subtitle(settings.quick_launch_path or "Not set")
        self._url_row.set_text(settings.custom_url)
        self._scan_button.set_sensitive(not self._controller.is_scanning)
        self._status.set_label(settings.error or "")

    def _report(self, outcome: tuple[bool, str | None]) -> None:
        ok, message = outcome
        if not ok and message:
            self._status.set_label(message)
        self.refresh()

    def _on_choose_mods(self, _button: Gtk.Button) -> None:
        self._report(self._controller.choose_mods_folder())

    def _on_open_mods(self, _button: Gtk.Button) -> None:
        self._report(self._controller.open_mods_folder())

    def _on_choose_launch(self, _button: Gtk.Button) -> None:
        self._report(self._controller.choose_quick_launch())

    def _on_url_apply(self, row: Adw.EntryRow) -> None:
        ok, message = self._controller.save_custom_url(row.get_text())
        if ok:
            self._notify("Custom URL saved.")
        self._report((ok, message))

    def _on_scan(self, _button: Gtk.Button) -> None:
        ok, message = self._controller.scan()
        handle = self._controller.scan_handle
        if not ok or handle is None:
            self._report((ok, message))
            return
        self._scan_button.set_sensitive(False)
        OperationProgressDialog(
            parent_window(self),
            "Scanning mods folder",
            handle,
            on_finished=self._on_scan_finished,
        ).present()

    def _on_scan_finished(self, update: OperationUpdate) -> None:
        self._notify(update.message)
        self.refresh()
        if update.kind == "complete":
            self._on_scanned()
