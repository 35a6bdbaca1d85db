"""Home dashboard view."""

from __future__ import annotations

from gi.repository import Adw, Gtk

from mod_deck.ui.controllers.dashboard_controller import DashboardController
from mod_deck.ui.widgets.common import clear_children, page_title, status_label


class DashboardPage(Gtk.Box):
    def __init__(self, controller: DashboardController) -> None:
        super().__init__(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        self._controller = controller
        self.set_margin_top(16)
        self.set_margin_bottom(16)
        self.set_margin_start(16)
        self.set_margin_end(16)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self.append(page_title("Dashboard"))
        self._status = status_label()
        self.append(self._status)

        self._total = Gtk.Label(xalign=0)
        self._total.add_css_class("title-1")
        self.append(self._total)

        scroll = Gtk.ScrolledWindow()
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        scroll.set_vexpand(True)
        self.append(scroll)
        self._groups = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=12)
        scroll.set_child(self._groups)

    def reload(self) -> None:
        self._controller.refresh()
        self.refresh()

    def refresh(self) -> None:
        controller = self._controller
        self._status.set_label(controller.error or "")
        total = controller.total_mods
        self._total.set_label(f"{total} mods installed" if total is not None else "")
        clear_children(self._groups)
        stats = controller.stats
        if stats is None:
            return

        top = Adw.PreferencesGroup(
            title="Most modded",
            description=f"{stats.entities_with_mods} entities have at least one mod",
        )
        for name, count in stats.top_entities:
            top.add(Adw.ActionRow(title=name, subtitle=f"{count} mods"))
        self._groups.append(top)

        by_category = Adw.PreferencesGroup(title="Mods by category")
        for name, count in stats.mods_by_category.items():
            by_category.add(Adw.ActionRow(title=name, subtitle=f"{count} mods"))
        self._groups.append(by_category)
