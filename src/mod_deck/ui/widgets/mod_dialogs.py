"""Dialogs opened from a mod card: edit, keybinds, add to presets."""

from __future__ import annotations

from typing import Callable

from gi.repository import Adw, Gtk

from mod_deck.models.asset import Asset, Keybind
from mod_deck.models.preset import Preset
from mod_deck.ui.widgets.common import parent_window


def _dialog(widget: Gtk.Widget, title: str, ok_label: str | None) -> tuple[Gtk.Dialog, Gtk.Box]:
    dialog = Gtk.Dialog(title=title, transient_for=parent_window(widget), modal=True)
    dialog.add_button("Close" if ok_label is None else "Cancel", Gtk.ResponseType.CANCEL)
    if ok_label is not None:
        dialog.add_button(ok_label, Gtk.ResponseType.OK)
    content = dialog.get_content_area()
    content.set_spacing(8)
    content.set_margin_top(10)
    content.set_margin_bottom(10)
    content.set_margin_start(10)
    content.set_margin_end(10)
    return dialog, content


def open_edit_dialog(
    widget: Gtk.Widget,
    asset: Asset,
    on_save: Callable[[dict], None],
    choose_image: Callable[[], str | None],
) -> None:
    dialog, content = _dialog(widget, f"Edit {asset.name}", "Save")
    dialog.set_default_size(520, 0)
    group = Adw.PreferencesGroup()
    content.append(group)

    name = Adw.EntryRow(title="Name")
    name.set_text(asset.name)
    group.add(name)
    author = Adw.EntryRow(title="Author")
    author.set_text(asset.author or "")
    group.add(author)
    tags = Adw.EntryRow(title="Tags (comma separated)")
    tags.set_text(asset.category_tag or "")
    group.add(tags)
    description = Adw.EntryRow(title="Description")
    description.set_text(asset.description or "")
    group.add(description)

    image_row = Adw.ActionRow(title="Preview image", subtitle=asset.image_filename or "None")
    image_button = Gtk.Button(label="Choose...")
    image_button.set_valign(Gtk.Align.CENTER)
    image_row.add_suffix(image_button)
    group.add(image_row)
    chosen: dict[str, str | None] = {"path": None}

    def _on_choose(_button: Gtk.Button) -> None:
        path = choose_image()
        if path:
            chosen["path"] = path
            image_row.set_subtitle(path)

    image_button.connect("clicked", _on_choose)

    def _on_response(_dialog: Gtk.Dialog, response: int) -> None:
        dialog.destroy()
        if response == Gtk.ResponseType.OK:
            on_save(
                {
                    "name": name.get_text(),
                    "author": author.get_text(),
                    "category_tag": tags.get_text(),
                    "description": description.get_text(),
                    "selected_image_path": chosen["path"],
                }
            )

    dialog.connect("response", _on_response)
    dialog.present()


def open_keybinds_dialog(widget: Gtk.Widget, asset: Asset, keybinds: list[Keybind]) -> None:
    dialog, content = _dialog(widget, f"Keybinds: {asset.name}", None)
    listbox = Gtk.ListBox()
    listbox.add_css_class("boxed-list")
    if not keybinds:
        listbox.append(Gtk.Label(label="No keybinds found in this mod's INI files.", xalign=0))
    for bind in keybinds:
        row = Adw.ActionRow(title=bind.title, subtitle=bind.key)
        listbox.append(row)
    content.append(listbox)
    dialog.connect("response", lambda d, _r: d.destroy())
    dialog.present()


def open_add_to_presets_dialog(
    widget: Gtk.Widget,
    asset: Asset,
    presets: list[Preset],
    on_apply: Callable[[list[int]], None],
) -> None:
    dialog, content = _dialog(widget, f"Add {asset.name} to presets", "Add")
    checks: dict[int, Gtk.CheckButton] = {}
    if not presets:
        content.append(Gtk.Label(label="No presets yet. Create one on the Presets page.", xalign=0))
    for preset in presets:
        check = Gtk.CheckButton(label=preset.name)
        checks[preset.id] = check
        content.append(check)

    def _on_response(_dialog: Gtk.Dialog, response: int) -> None:
        dialog.destroy()
        if response == Gtk.ResponseType.OK:
            on_apply([pid for pid, check in checks.items() if check.get_active()])

    dialog.connect("response", _on_response)
    dialog.present()
