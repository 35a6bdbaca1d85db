"""Main application window."""

from __future__ import annotations

from gi.repository import Adw, Gdk, Gio, Gtk

from mod_deck.bridge.errors import BackendError
from mod_deck.models.preset import Preset
from mod_deck.ui.bootstrap import AppSession
from mod_deck.ui.controllers.category_controller import CategoryController
from mod_deck.ui.controllers.dashboard_controller import DashboardController
from mod_deck.ui.controllers.entity_controller import EntityController
from mod_deck.ui.controllers.import_controller import ImportController
from mod_deck.ui.controllers.launch_controller import LaunchController
from mod_deck.ui.controllers.preset_controller import PresetController
from mod_deck.ui.controllers.settings_controller import SettingsController
from mod_deck.ui.state import UiState
from mod_deck.ui.views.category_page import CategoryPage
from mod_deck.ui.views.dashboard_page import DashboardPage
from mod_deck.ui.views.entity_page import EntityPage
from mod_deck.ui.views.preset_page import PresetPage
from mod_deck.ui.views.settings_page import SettingsPage
from mod_deck.ui.views.setup_page import SetupPage
from mod_deck.ui.widgets.common import clear_children, on_ui_thread
from mod_deck.ui.widgets.import_dialog import ImportDialog


class MainWindow(Adw.ApplicationWindow):
    """Top-level window with sidebar navigation over stacked pages."""

    def __init__(self, app: Adw.Application, state: UiState, session: AppSession) -> None:
        super().__init__(application=app, title="Mod Deck")
        self._state = state
        self._session = session
        backend = session.backend

        self._category_controller = CategoryController(backend=backend, prefs=session.prefs, state=state)
        self._entity_controller = EntityController(backend=backend, prefs=session.prefs, state=state)
        self._preset_controller = PresetController(backend=backend)
        self._import_controller = ImportController(backend=backend)
        self._settings_controller = SettingsController(backend=backend, settings=session.settings)
        self._launch_controller = LaunchController(backend=backend, settings=session.settings)
        self._dashboard_controller = DashboardController(backend=backend, state=state)

        self.set_default_size(1280, 820)
        self.set_size_request(960, 640)

        self._toasts = Adw.ToastOverlay()
        self.set_content(self._toasts)
        toolbar_view = Adw.ToolbarView()
        self._toasts.set_child(toolbar_view)

        header = Adw.HeaderBar()
        toolbar_view.add_top_bar(header)
        self._title_label = Gtk.Label()
        self._title_label.add_css_class("title-4")
        header.set_title_widget(self._title_label)

        self._import_button = Gtk.Button(label="Import")
        self._import_button.connect("clicked", self._on_import)
        header.pack_start(self._import_button)
        self._launch_button = Gtk.Button(label="Quick Launch")
        self._launch_button.add_css_class("suggested-action")
        self._launch_button.connect("clicked", self._on_launch)
        header.pack_end(self._launch_button)

        self._outer = Gtk.Stack()
        toolbar_view.set_content(self._outer)

        self._setup_page = SetupPage(self._settings_controller, self._on_setup_complete)
        self._outer.add_named(self._setup_page, "setup")

        split = Gtk.Paned(orientation=Gtk.Orientation.HORIZONTAL)
        split.set_shrink_start_child(False)
        split.set_resize_start_child(False)
        self._outer.add_named(split, "main")

        sidebar_scroll = Gtk.ScrolledWindow()
        sidebar_scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        sidebar_scroll.set_size_request(220, -1)
        self._sidebar = Gtk.ListBox()
        self._sidebar.add_css_class("navigation-sidebar")
        self._sidebar.connect("row-selected", self._on_sidebar_selected)
        sidebar_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=4)
        sidebar_box.append(self._sidebar)
        favorites_title = Gtk.Label(label="Favorite Presets", xalign=0)
        favorites_title.add_css_class("heading")
        favorites_title.set_margin_top(12)
        favorites_title.set_margin_start(12)
        sidebar_box.append(favorites_title)
        self._favorites = Gtk.ListBox()
        self._favorites.add_css_class("navigation-sidebar")
        self._favorites.set_selection_mode(Gtk.SelectionMode.NONE)
        self._favorites.connect("row-activated", self._on_favorite_activated)
        sidebar_box.append(self._favorites)
        sidebar_scroll.set_child(sidebar_box)
        split.set_start_child(sidebar_scroll)

        self._pages = Gtk.Stack()
        self._pages.set_hexpand(True)
        split.set_end_child(self._pages)

        self._dashboard_page = DashboardPage(self._dashboard_controller)
        self._category_page = CategoryPage(self._category_controller, self._open_entity)
        self._entity_page = EntityPage(
            self._entity_controller,
            notify=self.toast,
            list_presets=self._list_presets,
            choose_image=self._choose_image,
        )
        self._preset_page = PresetPage(self._preset_controller, self.toast, self._on_library_changed)
        self._settings_page = SettingsPage(self._settings_controller, self.toast, self._on_library_changed)
        self._pages.add_named(self._dashboard_page, "dashboard")
        self._pages.add_named(self._category_page, "category")
        self._pages.add_named(self._entity_page, "entity")
        self._pages.add_named(self._preset_page, "presets")
        self._pages.add_named(self._settings_page, "settings")

        drop = Gtk.DropTarget.new(Gio.File, Gdk.DragAction.COPY)
        drop.connect("drop", self._on_drop)
        self.add_controller(drop)

        self._sidebar_targets: list[tuple[str, str | None]] = []
        self._favorite_presets: list[Preset] = []
        session.client.on_close(on_ui_thread(self._on_backend_closed))

        self._sync_title()
        if session.settings.is_setup_complete:
            self._enter_main()
        else:
            self._outer.set_visible_child_name("setup")
            self._set_header_actions(False)

    # -- navigation -----------------------------------------------------------

    def _enter_main(self) -> None:
        self._outer.set_visible_child_name("main")
        self._set_header_actions(True)
        self._build_sidebar()

    def _set_header_actions(self, visible: bool) -> None:
        self._import_button.set_visible(visible)
        self._launch_button.set_visible(visible)

    def _build_sidebar(self) -> None:
        ok, message = self._category_controller.load_categories()
        if not ok and message:
            self.toast(message)
        clear_children(self._sidebar)
        self._sidebar_targets = [("dashboard", None)]
        self._sidebar_targets += [("category", c.slug) for c in self._category_controller.categories]
        self._sidebar_targets += [("presets", None), ("settings", None)]
        labels = ["Dashboard"] + [c.name for c in self._category_controller.categories]
        labels += ["Presets", "Settings"]
        for label in labels:
            row = Gtk.ListBoxRow()
            row.set_child(Gtk.Label(label=label, xalign=0, margin_top=6, margin_bottom=6))
            self._sidebar.append(row)
        self._sidebar.select_row(self._sidebar.get_row_at_index(0))

    def _build_favorites(self) -> None:
        self._preset_controller.load_favorites()
        self._favorite_presets = list(self._preset_controller.favorite_presets)
        clear_children(self._favorites)
        if not self._favorite_presets:
            empty = Gtk.Label(label="No favorites yet", xalign=0)
            empty.add_css_class("dim-label")
            self._favorites.append(empty)
            return
        for preset in self._favorite_presets:
            row = Gtk.ListBoxRow()
            row.set_child(Gtk.Label(label=preset.name, xalign=0, margin_top=4, margin_bottom=4))
            self._favorites.append(row)

    def _on_favorite_activated(self, _listbox: Gtk.ListBox, row: Gtk.ListBoxRow) -> None:
        index = row.get_index()
        if 0 <= index < len(self._favorite_presets):
            self._preset_page.apply(self._favorite_presets[index])

    def _on_sidebar_selected(self, _listbox: Gtk.ListBox, row: Gtk.ListBoxRow | None) -> None:
        if row is None:
            return
        page, slug = self._sidebar_targets[row.get_index()]
        if page == "dashboard":
            self._dashboard_page.reload()
            self._sync_title()
        elif page == "category" and slug is not None:
            self._category_page.show_category(slug)
        elif page == "presets":
            self._preset_page.reload()
        elif page == "settings":
            self._settings_page.refresh()
        self._pages.set_visible_child_name(page)
        self._build_favorites()

    def _open_entity(self, entity_slug: str) -> None:
        self._entity_page.show_entity(entity_slug)
        self._pages.set_visible_child_name("entity")

    def _on_setup_complete(self) -> None:
        if self._session.settings.is_setup_complete:
            self._enter_main()

    # -- header actions -------------------------------------------------------

    def _on_import(self, _button: Gtk.Button) -> None:
        self._show_import(self._import_controller.choose_archive())

    def _on_drop(self, _target: Gtk.DropTarget, value: Gio.File, _x: float, _y: float) -> bool:
        path = value.get_path() if isinstance(value, Gio.File) else None
        if not path or not self._session.settings.is_setup_complete:
            return False
        self._show_import(self._import_controller.open_archive(path))
        return True

    def _show_import(self, outcome: tuple[bool, str | None]) -> None:
        ok, message = outcome
        if not ok:
            if message:
                self.toast(message)
            return
        ImportDialog(self, self._import_controller, self._on_imported).present()

    def _on_imported(self, entity_slug: str) -> None:
        self.toast("Mod imported successfully.")
        if self._state.current_entity == entity_slug and self._pages.get_visible_child_name() == "entity":
            self._entity_page.show_entity(entity_slug)

    def _on_launch(self, _button: Gtk.Button) -> None:
        self._launch_button.set_sensitive(False)
        ok, message = self._launch_controller.launch()
        self._launch_button.set_sensitive(True)
        if ok:
            self.toast(message or "Game launched.")
        elif message:
            self.toast(message)

    # -- shared callbacks -----------------------------------------------------

    def toast(self, message: str) -> None:
        self._toasts.add_toast(Adw.Toast(title=message))

    def _list_presets(self) -> list[Preset]:
        self._preset_controller.refresh()
        return list(self._preset_controller.presets)

    def _choose_image(self) -> str | None:
        try:
            path = self._session.backend.select_file()
        except BackendError as exc:
            self.toast(f"Could not open file dialog: {exc}")
            return None
        return str(path) if path is not None else None

    def _on_library_changed(self) -> None:
        self._sync_title()
        visible = self._pages.get_visible_child_name()
        if visible == "dashboard":
            self._dashboard_page.reload()
        elif visible == "entity" and self._state.current_entity:
            self._entity_page.show_entity(self._state.current_entity)

    def _on_backend_closed(self, reason: str) -> None:
        self._sync_title()
        self.toast(f"Backend disconnected: {reason}")
        self._set_header_actions(False)

    def _sync_title(self) -> None:
        suffix = "" if self._state.backend_connected else "  (offline)"
        self._title_label.set_label(self._state.banner_title + suffix)
