"""GTK4 + Libadwaita application bootstrap."""

from __future__ import annotations

import logging

try:
    import gi
except ImportError as exc:  # pragma: no cover - import guard for missing system deps
    raise SystemExit(
        "PyGObject is required to run the UI. "
        "Install GTK4/Libadwaita bindings, then run `python -m mod_deck.ui.app`."
    ) from exc

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")

from gi.repository import Adw, Gio, Gtk

from mod_deck.bridge.errors import BackendError
from mod_deck.config import AppConfig, configure_logging
from mod_deck.ui.bootstrap import AppSession, bootstrap_session
from mod_deck.ui.state import UiState
from mod_deck.ui.views.window import MainWindow


logger = logging.getLogger(__name__)

APP_ID = "io.github.moddeck.App"


class ModDeckApp(Adw.Application):
    """Application object and activation lifecycle."""

    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__(application_id=APP_ID, flags=Gio.ApplicationFlags.FLAGS_NONE)
        self._session: AppSession
        self._state: UiState
        try:
            self._session, self._state = bootstrap_session(config)
        except (BackendError, OSError) as exc:
            raise SystemExit(f"Could not connect to the Mod Deck backend: {exc}") from exc

    def do_activate(self) -> None:  # type: ignore[override]
        window = self.props.active_window
        if window is None:
            try:
                window = MainWindow(self, self._state, self._session)
            except RuntimeError as exc:
                raise SystemExit(
                    "Gtk couldn't initialize a display. Run this app from a desktop session."
                ) from exc
        window.present()

    def do_shutdown(self) -> None:  # type: ignore[override]
        self._session.close()
        Adw.Application.do_shutdown(self)


def main() -> None:
    """Run the desktop app."""
    try:
        config = AppConfig.from_env()
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    configure_logging(config.log_level)

    init_ok = Gtk.init_check()
    if isinstance(init_ok, tuple):
        init_ok = init_ok[0]
    if not init_ok:
        raise SystemExit(
            "Gtk display initialization failed. Run the UI inside a desktop session."
        )
    app = ModDeckApp(config)
    logger.info("Starting Mod Deck (%s)", app.get_application_id())
    try:
        app.run([])
    except KeyboardInterrupt:
        # Allow Ctrl+C to terminate cleanly without a traceback.
        return


if __name__ == "__main__":
    main()
