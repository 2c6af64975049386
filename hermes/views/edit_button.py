"""Add/edit dialog for a single home-screen button.

Flow
----
1. Opened from the configuration screen, either empty ("Add Button…") or
   pre-filled from an existing ``ButtonEntry``.
2. Picking an image copies it into the uploads folder straight away via
   the bridge's ``save-image`` operation; the entry stores the copy.
3. "Save" stays disabled until label, link and image are all set, then
   hands the finished entry to ``on_save``.  Persisting is the caller's job.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Callable

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gtk

from hermes.backend.assets import make_asset_name
from hermes.models.button import ButtonEntry
from hermes.utils.image import load_fit_texture

log = logging.getLogger(__name__)

_PREVIEW_SIZE = 64


def upload_picked_image(bridge, category: str, source_path: str) -> str:
    """Copy a user-picked file into the uploads folder through *bridge*.

    Returns the stored path, or ``""`` if the file could not be read or
    written.
    """
    try:
        data = Path(source_path).read_bytes()
    except OSError as exc:
        log.warning("Could not read %s: %s", source_path, exc)
        return ""
    return bridge.save_image(make_asset_name(category, source_path), data)


def add_image_filter(chooser: Gtk.FileChooserNative) -> None:
    img_filter = Gtk.FileFilter()
    img_filter.set_name("Images (PNG, JPG, GIF, WebP, SVG)")
    img_filter.add_mime_type("image/png")
    img_filter.add_mime_type("image/jpeg")
    img_filter.add_mime_type("image/gif")
    img_filter.add_mime_type("image/webp")
    img_filter.add_mime_type("image/svg+xml")
    chooser.add_filter(img_filter)


class ButtonDialog(Adw.Dialog):
    """Dialog for creating or editing one ``ButtonEntry``."""

    def __init__(
        self,
        *,
        bridge,                                  # hermes.backend.bridge.Bridge
        on_save: Callable[[ButtonEntry], None],
        entry: ButtonEntry | None = None,
    ) -> None:
        super().__init__(
            title="Edit Button" if entry else "Add Button",
            content_width=480,
        )
        self._bridge = bridge
        self._on_save = on_save
        self._original = entry if entry is not None else ButtonEntry()
        self._img_path: str = self._original.img

        self._build_ui()
        if entry is not None:
            self._label_entry.set_text(entry.label)
            self._link_entry.set_text(entry.link)
        self._refresh_image_row()
        self._update_save_sensitivity()

    # ── UI construction ───────────────────────────────────────────────────

    def _build_ui(self) -> None:
        toolbar_view = Adw.ToolbarView()

        header = Adw.HeaderBar()
        header.set_show_end_title_buttons(False)

        cancel_btn = Gtk.Button(label="Cancel")
        cancel_btn.connect("clicked", lambda _b: self.close())
        header.pack_start(cancel_btn)

        self._save_btn = Gtk.Button(label="Save")
        self._save_btn.add_css_class("suggested-action")
        self._save_btn.connect("clicked", self._on_save_clicked)
        header.pack_end(self._save_btn)

        toolbar_view.add_top_bar(header)

        page = Adw.PreferencesPage()
        group = Adw.PreferencesGroup()

        self._label_entry = Adw.EntryRow(title="Label *")
        self._label_entry.connect("changed", self._on_field_changed)
        group.add(self._label_entry)

        self._link_entry = Adw.EntryRow(title="Link *")
        self._link_entry.set_input_purpose(Gtk.InputPurpose.URL)
        self._link_entry.connect("changed", self._on_field_changed)
        group.add(self._link_entry)

        self._image_row = Adw.ActionRow(title="Image *")
        self._preview = Gtk.Image()
        self._preview.set_pixel_size(_PREVIEW_SIZE)
        self._image_row.add_prefix(self._preview)
        change_btn = Gtk.Button(label="Choose…")
        change_btn.set_valign(Gtk.Align.CENTER)
        change_btn.connect("clicked", self._pick_image)
        self._image_row.add_suffix(change_btn)
        group.add(self._image_row)

        page.add(group)
        toolbar_view.set_content(page)
        self.set_child(toolbar_view)

    # ── Image picking ─────────────────────────────────────────────────────

    def _pick_image(self, _btn) -> None:
        chooser = Gtk.FileChooserNative(
            title="Select Button Image",
            transient_for=self.get_root(),
            action=Gtk.FileChooserAction.OPEN,
        )
        add_image_filter(chooser)
        chooser.connect("response", self._on_image_chosen, chooser)
        chooser.show()

    def _on_image_chosen(self, _chooser, response, chooser) -> None:
        if response != Gtk.ResponseType.ACCEPT:
            return
        stored = upload_picked_image(self._bridge, "button", chooser.get_file().get_path())
        if not stored:
            self._alert("Could Not Add Image", "The image could not be copied.")
            return
        self._img_path = stored
        self._refresh_image_row()
        self._update_save_sensitivity()

    def _refresh_image_row(self) -> None:
        if not self._img_path:
            self._image_row.set_subtitle("No image set")
            self._preview.set_from_icon_name("image-missing-symbolic")
            return
        self._image_row.set_subtitle(Path(self._img_path).name)
        texture = load_fit_texture(
            self._bridge.read_image_as_data_url(self._img_path), _PREVIEW_SIZE
        )
        if texture is not None:
            self._preview.set_from_paintable(texture)
        else:
            self._preview.set_from_icon_name("image-missing-symbolic")

    # ── Save ──────────────────────────────────────────────────────────────

    def _current_entry(self) -> ButtonEntry:
        return dataclasses.replace(
            self._original,
            img=self._img_path,
            link=self._link_entry.get_text().strip(),
            label=self._label_entry.get_text().strip(),
        )

    def _on_field_changed(self, _row) -> None:
        self._update_save_sensitivity()

    def _update_save_sensitivity(self) -> None:
        self._save_btn.set_sensitive(self._current_entry().is_complete)

    def _on_save_clicked(self, _btn) -> None:
        entry = self._current_entry()
        if not entry.is_complete:
            return
        self._on_save(entry)
        self.close()

    def _alert(self, heading: str, body: str) -> None:
        dialog = Adw.AlertDialog(heading=heading, body=body)
        dialog.add_response("ok", "OK")
        dialog.present(self)
