"""Configuration screen for the launcher settings and buttons."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gtk

from hermes.backend.bridge import FileFilter, FileSelectionOptions
from hermes.backend.config import DEFAULT_CONFIG
from hermes.models.button import ButtonEntry
from hermes.views.edit_button import ButtonDialog, add_image_filter, upload_picked_image

log = logging.getLogger(__name__)

_MIN_WINDOW_SIZE = 100
_MAX_WINDOW_SIZE = 16384


class SettingsPage(Adw.PreferencesPage):
    """Editable view of config.json.

    Buttons and the background image are saved as soon as they change;
    the window settings wait for the "Save" button.  Every save merges
    the fields this page owns onto the current config before handing the
    whole document to the bridge, so unknown keys in config.json survive,
    including unknown keys inside each button.  Entries of the buttons
    list that are not objects are dropped on the next button change.
    """

    def __init__(
        self,
        *,
        bridge,                                         # hermes.backend.bridge.Bridge
        on_saved: Callable[[bool], None] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(title="Configuration", **kwargs)
        self._bridge = bridge
        self._on_saved = on_saved
        self._buttons: list[ButtonEntry] = []
        self._button_rows: list[Adw.ActionRow] = []
        self._background: str = ""
        self._chrome_path: str = ""

        self._build_display_group()
        self._build_browser_group()
        self._build_buttons_group()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_display_group(self) -> None:
        group = Adw.PreferencesGroup(title="Display")

        self._background_row = Adw.ActionRow(title="Background Image")
        clear_btn = Gtk.Button(icon_name="edit-clear-symbolic", tooltip_text="Remove image")
        clear_btn.add_css_class("flat")
        clear_btn.set_valign(Gtk.Align.CENTER)
        clear_btn.connect("clicked", self._on_background_clear)
        self._background_clear_btn = clear_btn
        self._background_row.add_suffix(clear_btn)
        change_btn = Gtk.Button(label="Change…")
        change_btn.set_valign(Gtk.Align.CENTER)
        change_btn.connect("clicked", self._pick_background)
        self._background_row.add_suffix(change_btn)
        group.add(self._background_row)

        self._fullscreen_row = Adw.SwitchRow(
            title="Fullscreen",
            subtitle="Takes effect the next time Hermes starts",
        )
        group.add(self._fullscreen_row)

        self._width_row = Adw.SpinRow.new_with_range(_MIN_WINDOW_SIZE, _MAX_WINDOW_SIZE, 10)
        self._width_row.set_title("Window Width")
        group.add(self._width_row)

        self._height_row = Adw.SpinRow.new_with_range(_MIN_WINDOW_SIZE, _MAX_WINDOW_SIZE, 10)
        self._height_row.set_title("Window Height")
        group.add(self._height_row)

        self.add(group)

    def _build_browser_group(self) -> None:
        group = Adw.PreferencesGroup(
            title="Browser",
            description=(
                "Leave the executable empty to open links with the "
                "system's default browser."
            ),
        )

        self._chrome_row = Adw.ActionRow(title="Executable")
        browse_btn = Gtk.Button(label="Browse…")
        browse_btn.set_valign(Gtk.Align.CENTER)
        browse_btn.connect("clicked", self._on_browse_executable)
        self._chrome_row.add_suffix(browse_btn)
        clear_btn = Gtk.Button(icon_name="edit-clear-symbolic", tooltip_text="Use default browser")
        clear_btn.add_css_class("flat")
        clear_btn.set_valign(Gtk.Align.CENTER)
        clear_btn.connect("clicked", lambda _b: self._set_chrome_path(""))
        self._chrome_row.add_suffix(clear_btn)
        group.add(self._chrome_row)

        self._chrome_args_row = Adw.EntryRow(title="Arguments (space separated)")
        group.add(self._chrome_args_row)

        save_btn = Gtk.Button(label="Save")
        save_btn.add_css_class("suggested-action")
        save_btn.add_css_class("pill")
        save_btn.set_halign(Gtk.Align.CENTER)
        save_btn.set_margin_top(12)
        save_btn.connect("clicked", self._on_save_clicked)

        self.add(group)
        save_group = Adw.PreferencesGroup()
        save_group.add(save_btn)
        self.add(save_group)

    def _build_buttons_group(self) -> None:
        self._buttons_group = Adw.PreferencesGroup(
            title="Buttons",
            description="Shown on the home screen in this order.",
        )

        # "Add" row, always the last row.
        self._add_row = Adw.ActionRow(title="Add Button…")
        self._add_row.set_activatable(True)
        self._add_row.add_prefix(Gtk.Image.new_from_icon_name("list-add-symbolic"))
        self._add_row.connect("activated", self._on_add_activated)

        self.add(self._buttons_group)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Fill every row from the current config."""
        cfg = self._bridge.get_config()

        self._background = cfg.get("backgroundImage") or ""
        self._refresh_background_row()

        self._fullscreen_row.set_active(cfg.get("fullscreen") is True)
        self._width_row.set_value(_as_int(cfg.get("windowWidth"), DEFAULT_CONFIG["windowWidth"]))
        self._height_row.set_value(_as_int(cfg.get("windowHeight"), DEFAULT_CONFIG["windowHeight"]))
        self._set_chrome_path(cfg.get("chromeExecutablePath") or "")
        self._chrome_args_row.set_text(cfg.get("chromeArgs") or "")

        raw = cfg.get("buttons")
        raw = raw if isinstance(raw, list) else []
        self._buttons = [ButtonEntry.from_dict(b) for b in raw if isinstance(b, dict)]
        if len(self._buttons) != len(raw):
            log.warning("Ignoring %d malformed button entries", len(raw) - len(self._buttons))
        self._rebuild_button_rows()

    # ------------------------------------------------------------------
    # Background
    # ------------------------------------------------------------------

    def _refresh_background_row(self) -> None:
        self._background_row.set_subtitle(
            Path(self._background).name if self._background else "No image set"
        )
        self._background_clear_btn.set_sensitive(bool(self._background))

    def _pick_background(self, _btn) -> None:
        root = self.get_root()
        chooser = Gtk.FileChooserNative(
            title="Select Background Image",
            transient_for=root if isinstance(root, Gtk.Window) else None,
            action=Gtk.FileChooserAction.OPEN,
        )
        add_image_filter(chooser)
        chooser.connect("response", self._on_background_chosen, chooser)
        chooser.show()

    def _on_background_chosen(self, _chooser, response, chooser) -> None:
        if response != Gtk.ResponseType.ACCEPT:
            return
        stored = upload_picked_image(self._bridge, "background", chooser.get_file().get_path())
        if not stored:
            self._alert("Could Not Set Background", "The image could not be copied.")
            return
        self._background = stored
        self._refresh_background_row()
        self._save({"backgroundImage": stored})

    def _on_background_clear(self, _btn) -> None:
        self._background = ""
        self._refresh_background_row()
        self._save({"backgroundImage": ""})

    # ------------------------------------------------------------------
    # Browser
    # ------------------------------------------------------------------

    def _set_chrome_path(self, path: str) -> None:
        self._chrome_path = path
        self._chrome_row.set_subtitle(path or "System default")

    def _on_browse_executable(self, _btn) -> None:
        options = FileSelectionOptions(
            title="Select Browser Executable",
            default_path=self._chrome_path,
            filters=(FileFilter("Executables", ("exe", "app", "bin", "")),),
        )
        path = self._bridge.select_file(options)
        if path:
            self._set_chrome_path(path)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def _on_save_clicked(self, _btn) -> None:
        self._save({
            "backgroundImage": self._background,
            "fullscreen": self._fullscreen_row.get_active(),
            "windowWidth": int(self._width_row.get_value()),
            "windowHeight": int(self._height_row.get_value()),
            "chromeExecutablePath": self._chrome_path,
            "chromeArgs": self._chrome_args_row.get_text().strip(),
        })

    def _save(self, fields: dict) -> None:
        ok = self._bridge.save_config({**self._bridge.get_config(), **fields})
        if not ok:
            log.error("Saving %s failed", sorted(fields))
        if self._on_saved:
            self._on_saved(ok)

    # ------------------------------------------------------------------
    # Button list management
    # ------------------------------------------------------------------

    def _rebuild_button_rows(self) -> None:
        """Sync the visible rows with ``self._buttons``."""
        if self._add_row.get_parent() is not None:
            self._buttons_group.remove(self._add_row)

        for row in self._button_rows:
            self._buttons_group.remove(row)
        self._button_rows.clear()

        for idx, entry in enumerate(self._buttons):
            row = self._make_button_row(idx, entry)
            self._button_rows.append(row)
            self._buttons_group.add(row)

        # Add-row is always last.
        self._buttons_group.add(self._add_row)

    def _make_button_row(self, idx: int, entry: ButtonEntry) -> Adw.ActionRow:
        row = Adw.ActionRow(title=entry.label or "(untitled)", subtitle=entry.link)
        row.set_subtitle_lines(1)

        edit_btn = Gtk.Button(
            icon_name="document-edit-symbolic",
            valign=Gtk.Align.CENTER,
            has_frame=False,
            tooltip_text="Edit button",
        )
        edit_btn.connect("clicked", self._on_edit_button, idx)
        row.add_suffix(edit_btn)

        del_btn = Gtk.Button(
            icon_name="user-trash-symbolic",
            valign=Gtk.Align.CENTER,
            has_frame=False,
            tooltip_text="Remove button",
        )
        del_btn.add_css_class("destructive-action")
        del_btn.connect("clicked", self._on_delete_button, idx)
        row.add_suffix(del_btn)
        return row

    def _on_add_activated(self, _row) -> None:
        def _on_save(entry: ButtonEntry) -> None:
            self._commit_buttons(self._buttons + [entry])

        ButtonDialog(bridge=self._bridge, on_save=_on_save).present(self)

    def _on_edit_button(self, _btn, idx: int) -> None:
        def _on_save(entry: ButtonEntry) -> None:
            buttons = list(self._buttons)
            buttons[idx] = entry
            self._commit_buttons(buttons)

        ButtonDialog(
            bridge=self._bridge, on_save=_on_save, entry=self._buttons[idx]
        ).present(self)

    def _on_delete_button(self, _btn, idx: int) -> None:
        self._commit_buttons([b for i, b in enumerate(self._buttons) if i != idx])

    def _commit_buttons(self, buttons: list[ButtonEntry]) -> None:
        self._buttons = buttons
        self._rebuild_button_rows()
        self._save({"buttons": [b.to_dict() for b in buttons]})

    def _alert(self, heading: str, body: str) -> None:
        dialog = Adw.AlertDialog(heading=heading, body=body)
        dialog.add_response("ok", "OK")
        dialog.present(self)


def _as_int(value, fallback: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return fallback
