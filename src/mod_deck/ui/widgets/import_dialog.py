"""Import-from-archive dialog."""

from __future__ import annotations

from typing import Callable

from gi.repository import Adw, Gtk

from mod_deck.ui.controllers.import_controller import ImportController
from mod_deck.ui.widgets.common import parent_window, run_in_background, status_label


class ImportDialog(Gtk.Dialog):
    """Form over an analyzed archive; the controller owns the draft."""

    def __init__(
        self,
        widget: Gtk.Widget,
        controller: ImportController,
        on_imported: Callable[[str], None],
    ) -> None:
        super().__init__(title="Import Mod", transient_for=parent_window(widget), modal=True)
        self._controller = controller
        self._on_imported = on_imported
        self._updating = False
        self._busy = False
        self.set_default_size(640, 720)
        self.add_button("Cancel", Gtk.ResponseType.CANCEL)
        self._import_button = self.add_button("Import", Gtk.ResponseType.OK)

        content = self.get_content_area()
        content.set_spacing(8)
        content.set_margin_top(10)
        content.set_margin_bottom(10)
        content.set_margin_start(10)
        content.set_margin_end(10)

        analysis = controller.analysis
        archive = analysis.archive_name if analysis is not None else ""
        content.append(Gtk.Label(label=f"Archive: {archive}", xalign=0, wrap=True))

        status_row = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self._spinner = Gtk.Spinner()
        self._spinner.set_visible(False)
        status_row.append(self._spinner)
        self._status = status_label()
        status_row.append(self._status)
        content.append(status_row)

        group = Adw.PreferencesGroup(title="Mod Details")
        content.append(group)

        self._name = Adw.EntryRow(title="Mod name")
        group.add(self._name)
        self._author = Adw.EntryRow(title="Author")
        group.add(self._author)
        self._tags = Adw.EntryRow(title="Tags (comma separated)")
        group.add(self._tags)
        self._description = Adw.EntryRow(title="Description")
        group.add(self._description)

        target = Adw.PreferencesGroup(title="Target")
        content.append(target)
        self._category = Adw.ComboRow(title="Category")
        self._category.connect("notify::selected", self._on_category_changed)
        target.add(self._category)
        self._entity = Adw.ComboRow(title="Character / entity")
        target.add(self._entity)

        preview_row = Adw.ActionRow(title="Preview image")
        choose = Gtk.Button(label="Choose...")
        choose.set_valign(Gtk.Align.CENTER)
        choose.connect("clicked", self._on_choose_preview)
        preview_row.add_suffix(choose)
        target.add(preview_row)
        self._picture = Gtk.Picture()
        self._picture.set_size_request(-1, 140)
        self._picture.set_can_shrink(True)
        content.append(self._picture)

        frame = Gtk.Frame(label="Mod root folder")
        frame.set_vexpand(True)
        scroll = Gtk.ScrolledWindow()
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        scroll.set_min_content_height(160)
        frame.set_child(scroll)
        self._roots = Gtk.ListBox()
        self._roots.set_selection_mode(Gtk.SelectionMode.SINGLE)
        scroll.set_child(self._roots)
        content.append(frame)

        self._category_slugs: list[str | None] = []
        self._entity_slugs: list[str | None] = []
        self._root_paths: list[str] = []
        self._load_from_draft()
        self.connect("response", self._on_response)

    def _load_from_draft(self) -> None:
        self._updating = True
        draft = self._controller.draft
        self._name.set_text(draft.mod_name)
        self._author.set_text(draft.author)
        self._tags.set_text(draft.category_tag)
        self._description.set_text(draft.description)

        self._category_slugs = [None] + [c.slug for c in self._controller.categories]
        labels = ["(choose)"] + [c.name for c in self._controller.categories]
        self._category.set_model(Gtk.StringList.new(labels))
        selected = draft.category_slug
        self._category.set_selected(
            self._category_slugs.index(selected) if selected in self._category_slugs else 0
        )
        self._reload_entities()

        analysis = self._controller.analysis
        self._root_paths = []
        if analysis is not None:
            for entry in analysis.entries:
                if not entry.is_dir:
                    continue
                self._root_paths.append(entry.path)
                suffix = "  (likely)" if entry.is_likely_mod_root else ""
                self._roots.append(Gtk.Label(label=f"{entry.path}{suffix}", xalign=0))
        if draft.internal_root in self._root_paths:
            row = self._roots.get_row_at_index(self._root_paths.index(draft.internal_root))
            self._roots.select_row(row)
        self._sync_preview()
        self._updating = False

    def _reload_entities(self) -> None:
        entities = self._controller.entities
        self._entity_slugs = [None] + [e.slug for e in entities]
        self._entity.set_model(Gtk.StringList.new(["(choose)"] + [e.name for e in entities]))
        current = self._controller.draft.entity_slug
        self._entity.set_selected(self._entity_slugs.index(current) if current in self._entity_slugs else 0)

    def _on_category_changed(self, *_args) -> None:
        if self._updating:
            return
        index = self._category.get_selected()
        slug = self._category_slugs[index] if 0 <= index < len(self._category_slugs) else None
        self._controller.select_category(slug)
        self._reload_entities()

    def _on_choose_preview(self, _button: Gtk.Button) -> None:
        ok, message = self._controller.choose_preview_image()
        if not ok and message:
            self._status.set_label(message)
        self._sync_preview()

    def _sync_preview(self) -> None:
        handle = self._controller.preview_handle
        self._picture.set_filename(str(handle.path) if handle is not None else None)

    def _collect(self) -> None:
        draft = self._controller.draft
        draft.mod_name = self._name.get_text()
        draft.author = self._author.get_text()
        draft.category_tag = self._tags.get_text()
        draft.description = self._description.get_text()
        index = self._entity.get_selected()
        draft.entity_slug = self._entity_slugs[index] if 0 <= index < len(self._entity_slugs) else None
        row = self._roots.get_selected_row()
        if row is not None:
            draft.internal_root = self._root_paths[row.get_index()]

    def _on_response(self, _dialog: Gtk.Dialog, response: int) -> None:
        if self._busy:
            return
        if response != Gtk.ResponseType.OK:
            self._controller.close()
            self.destroy()
            return
        self._collect()
        self._set_busy(True)
        run_in_background(self._controller.submit, self._on_submitted)

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self._import_button.set_sensitive(not busy)
        self.set_deletable(not busy)
        self._spinner.set_visible(busy)
        if busy:
            self._status.set_label("")
            self._spinner.start()
        else:
            self._spinner.stop()

    def _on_submitted(self, outcome: tuple[bool, str | None]) -> None:
        self._set_busy(False)
        ok, message = outcome
        if not ok:
            self._status.set_label(message or "")
            return
        self.destroy()
        if message:
            self._on_imported(message)
