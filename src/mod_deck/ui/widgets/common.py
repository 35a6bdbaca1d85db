"""Small helpers shared by pages and dialogs."""

from __future__ import annotations

import threading
from typing import Callable

from gi.repository import GLib, Gtk


def clear_children(container: Gtk.Widget) -> None:
    child = container.get_first_child()
    while child is not None:
        next_child = child.get_next_sibling()
        container.remove(child)
        child = next_child


def on_ui_thread(callback: Callable[..., None]) -> Callable[..., None]:
    """Wrap ``callback`` so calls from the bridge thread run on the GTK main loop."""

    def _schedule(*args) -> None:
        def _run() -> bool:
            callback(*args)
            return False

        GLib.idle_add(_run)

    return _schedule


def run_in_background(work: Callable[[], object], on_done: Callable[[object], None]) -> None:
    """Run ``work`` on a worker thread and hand its result to ``on_done`` on the main loop."""
    deliver = on_ui_thread(on_done)
    threading.Thread(target=lambda: deliver(work()), daemon=True).start()


def page_title(text: str) -> Gtk.Label:
    title = Gtk.Label(label=text)
    title.add_css_class("title-2")
    title.set_xalign(0)
    return title


def status_label() -> Gtk.Label:
    label = Gtk.Label(xalign=0, wrap=True)
    label.add_css_class("error")
    return label


def parent_window(widget: Gtk.Widget) -> Gtk.Window | None:
    root = widget.get_root()
    return root if isinstance(root, Gtk.Window) else None


def confirm(
    widget: Gtk.Widget,
    title: str,
    body: str,
    on_confirm: Callable[[], None],
    confirm_label: str = "Confirm",
) -> None:
    dialog = Gtk.Dialog(title=title, transient_for=parent_window(widget), modal=True)
    dialog.add_button("Cancel", Gtk.ResponseType.CANCEL)
    dialog.add_button(confirm_label, Gtk.ResponseType.OK)
    content = dialog.get_content_area()
    content.set_margin_top(12)
    content.set_margin_bottom(12)
    content.set_margin_start(12)
    content.set_margin_end(12)
    content.append(Gtk.Label(label=body, xalign=0, wrap=True))

    def _on_response(_dialog: Gtk.Dialog, response: int) -> None:
        dialog.destroy()
        if response == Gtk.ResponseType.OK:
            on_confirm()

    dialog.connect("response", _on_response)
    dialog.present()
