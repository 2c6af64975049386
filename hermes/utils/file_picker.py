"""Blocking native file chooser for the bridge's ``select-file`` operation."""

from __future__ import annotations

import logging

import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gio, GLib, Gtk  # noqa: E402

from hermes.backend.bridge import FileSelectionOptions  # noqa: E402

log = logging.getLogger(__name__)


class GtkFilePicker:
    """Show a ``Gtk.FileChooserNative`` and wait for the answer.

    The bridge contract is synchronous, so the chooser runs inside a nested
    GLib main loop; the rest of the UI keeps redrawing while it is open.
    """

    def __init__(self, parent: Gtk.Window | None = None) -> None:
        self._parent = parent

    def __call__(self, options: FileSelectionOptions) -> str | None:
        select_dir = "openDirectory" in options.properties
        chooser = Gtk.FileChooserNative(
            title=options.title or ("Select Folder" if select_dir else "Select File"),
            transient_for=self._parent,
            action=(
                Gtk.FileChooserAction.SELECT_FOLDER
                if select_dir
                else Gtk.FileChooserAction.OPEN
            ),
            modal=True,
        )
        if options.button_label:
            chooser.set_accept_label(options.button_label)
        if options.default_path:
            start = Gio.File.new_for_path(options.default_path)
            try:
                chooser.set_current_folder(start if select_dir else start.get_parent())
            except GLib.Error as exc:
                log.debug("Ignoring default path %s: %s", options.default_path, exc)

        for spec in options.filters:
            f = Gtk.FileFilter()
            f.set_name(spec.name)
            exts = [e for e in spec.extensions if e not in ("", "*")]
            if not exts or len(exts) != len(spec.extensions):
                # An empty or "*" extension means "anything", e.g. Linux
                # executables without a suffix.
                f.add_pattern("*")
            for ext in exts:
                f.add_suffix(ext)
            chooser.add_filter(f)

        main_loop = GLib.MainLoop()
        _chosen: list = [None]

        def _on_response(dialog, response):
            try:
                if response == Gtk.ResponseType.ACCEPT:
                    gfile = dialog.get_file()
                    _chosen[0] = gfile.get_path() if gfile else None
            finally:
                main_loop.quit()

        chooser.connect("response", _on_response)
        chooser.show()
        main_loop.run()
        chooser.destroy()
        return _chosen[0]
