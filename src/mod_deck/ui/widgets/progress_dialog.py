"""Modal progress window for a tracked backend operation."""

from __future__ import annotations

from typing import Callable

from gi.repository import Gtk

from mod_deck.bridge.events import OperationHandle, OperationUpdate
from mod_deck.ui.widgets.common import on_ui_thread


class OperationProgressDialog(Gtk.Window):
    """Shows start/progress/terminal updates; closing only hides local delivery."""

    def __init__(
        self,
        parent: Gtk.Window | None,
        title: str,
        handle: OperationHandle,
        on_finished: Callable[[OperationUpdate], None] | None = None,
    ) -> None:
        super().__init__(title=title, modal=True, transient_for=parent)
        self._handle = handle
        self._on_finished = on_finished
        self.set_default_size(460, 160)

        box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=10)
        box.set_margin_top(16)
        box.set_margin_bottom(16)
        box.set_margin_start(16)
        box.set_margin_end(16)
        self.set_child(box)

        self._message = Gtk.Label(label="Starting...", xalign=0, wrap=True)
        box.append(self._message)

        self._bar = Gtk.ProgressBar()
        self._bar.set_show_text(True)
        box.append(self._bar)

        self._path = Gtk.Label(xalign=0, wrap=True)
        self._path.add_css_class("dim-label")
        box.append(self._path)

        self._close = Gtk.Button(label="Close")
        self._close.set_halign(Gtk.Align.END)
        self._close.set_sensitive(False)
        self._close.connect("clicked", lambda *_: self.close())
        box.append(self._close)

        self.connect("close-request", self._on_close_request)
        handle.add_listener(on_ui_thread(self._on_update))

    def _on_update(self, update: OperationUpdate) -> None:
        if update.progress is not None:
            self._bar.set_fraction(update.progress.fraction)
            self._bar.set_text(f"{update.progress.label()} ({update.progress.percent}%)")
            self._message.set_label(update.progress.message or "Working...")
            self._path.set_label(update.progress.current_path or "")
        if not update.is_terminal:
            return
        if update.kind == "complete":
            self._bar.set_fraction(1.0)
            self._bar.set_text("100%")
            self._message.remove_css_class("error")
        else:
            self._message.add_css_class("error")
        self._message.set_label(update.message)
        self._path.set_label("")
        self._close.set_sensitive(True)
        if self._on_finished is not None:
            self._on_finished(update)

    def _on_close_request(self, *_args) -> bool:
        self._handle.detach()
        return False
