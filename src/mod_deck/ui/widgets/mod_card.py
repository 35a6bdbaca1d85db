"""One installed mod, shown as a grid card or a list row."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from gi.repository import Gtk

from mod_deck.engine.folder_names import display_name
from mod_deck.models.asset import Asset


class ModCard(Gtk.Box):
    """Mod summary with enable switch, selection check and actions."""

    def __init__(
        self,
        asset: Asset,
        *,
        selected: bool,
        compact: bool,
        image_path: Path | None,
        on_toggle: Callable[[Asset], None],
        on_select: Callable[[Asset, bool], None],
        on_action: Callable[[str, Asset], None],
    ) -> None:
        orientation = Gtk.Orientation.HORIZONTAL if compact else Gtk.Orientation.VERTICAL
        super().__init__(orientation=orientation, spacing=8)
        self.asset = asset
        self.add_css_class("card")
        self.set_margin_top(4)
        self.set_margin_bottom(4)
        self.set_margin_start(4)
        self.set_margin_end(4)

        check = Gtk.CheckButton()
        check.set_active(selected)
        check.connect("toggled", lambda btn: on_select(asset, btn.get_active()))
        self.append(check)

        if not compact:
            picture = Gtk.Picture()
            picture.set_size_request(220, 124)
            picture.set_can_shrink(True)
            if image_path is not None and image_path.is_file():
                picture.set_filename(str(image_path))
            self.append(picture)

        text = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=2)
        text.set_hexpand(True)
        name = Gtk.Label(label=asset.name, xalign=0, wrap=True)
        name.add_css_class("heading")
        text.append(name)
        meta = [f"by {asset.author}" if asset.author else "", ", ".join(asset.tags())]
        byline = Gtk.Label(label="  ".join(part for part in meta if part), xalign=0, wrap=True)
        byline.add_css_class("dim-label")
        text.append(byline)
        folder = Gtk.Label(label=display_name(asset.folder_name), xalign=0)
        folder.add_css_class("caption")
        text.append(folder)
        self.append(text)

        controls = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=4)
        switch = Gtk.Switch()
        switch.set_active(asset.is_enabled)
        switch.set_valign(Gtk.Align.CENTER)
        switch.connect("state-set", lambda *_: on_toggle(asset) or True)
        controls.append(switch)

        menu = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=2)
        for action, icon, tooltip in (
            ("edit", "document-edit-symbolic", "Edit details"),
            ("keybinds", "input-keyboard-symbolic", "View keybinds"),
            ("folder", "folder-open-symbolic", "Open folder"),
            ("presets", "list-add-symbolic", "Add to presets"),
            ("delete", "user-trash-symbolic", "Delete mod"),
        ):
            button = Gtk.Button.new_from_icon_name(icon)
            button.set_tooltip_text(tooltip)
            button.add_css_class("flat")
            button.connect("clicked", lambda _b, a=action: on_action(a, asset))
            menu.append(button)
        controls.append(menu)
        self.append(controls)
