"""Main application window."""

from __future__ import annotations

import logging

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gio, Gtk

from hermes.backend.assets import UPLOADS_DIR, AssetManager
from hermes.backend.bridge import Bridge
from hermes.backend.config import ConfigError, ConfigStore, data_dir
from hermes.models.update import UpdateInfo

log = logging.getLogger(__name__)


class HermesWindow(Adw.ApplicationWindow):
    """Home screen and configuration screen in one window.

    ``Ctrl+I`` flips between the two; the configuration screen also has a
    back button.  The window owns the ``Bridge`` every view talks to.
    """

    def __init__(self, *, bridge: Bridge | None = None, **kwargs) -> None:
        super().__init__(title="Hermes", **kwargs)

        if bridge is None:
            base = data_dir()
            bridge = Bridge(ConfigStore(base), AssetManager(base / UPLOADS_DIR))
        self._bridge = bridge

        from hermes.utils.file_picker import GtkFilePicker

        self._bridge.set_file_picker(GtkFilePicker(parent=self))

        self._apply_geometry()

        self._toast_overlay = Adw.ToastOverlay()
        self._stack = Gtk.Stack()
        self._stack.set_transition_type(Gtk.StackTransitionType.CROSSFADE)
        self._toast_overlay.set_child(self._stack)
        self.set_content(self._toast_overlay)

        from hermes.views.home import HomeView
        from hermes.views.settings import SettingsPage

        self._home = HomeView()
        self._home.connect("link-activated", self._on_link_activated)
        self._home.connect("open-config", lambda _v: self.show_config())
        self._stack.add_named(self._home, "home")

        self._settings = SettingsPage(bridge=self._bridge, on_saved=self._on_config_saved)
        settings_view = Adw.ToolbarView()
        header = Adw.HeaderBar()
        back_btn = Gtk.Button(icon_name="go-previous-symbolic", tooltip_text="Back to Home")
        back_btn.connect("clicked", lambda _b: self.show_home())
        header.pack_start(back_btn)
        settings_view.add_top_bar(header)
        settings_view.set_content(self._settings)
        self._stack.add_named(settings_view, "config")

        toggle_action = Gio.SimpleAction.new("toggle-config", None)
        toggle_action.connect("activate", self._on_toggle_config)
        self.add_action(toggle_action)

        self._update_callbacks = [
            self._bridge.on_update_available(self._on_update_available),
            self._bridge.on_update_downloaded(self._on_update_downloaded),
            self._bridge.on_update_error(self._on_update_error),
        ]
        self.connect("close-request", self._on_close_request)

        self.show_home()

    # ── Setup ─────────────────────────────────────────────────────────────

    def _apply_geometry(self) -> None:
        store = self._bridge.store
        try:
            store.initialize()
        except ConfigError as exc:
            log.error("Starting with default settings: %s", exc)
        width, height = store.window_size()
        self.set_default_size(width, height)
        if store.is_fullscreen():
            self.fullscreen()

    # ── Navigation ────────────────────────────────────────────────────────

    def show_home(self) -> None:
        self._home.load(self._bridge)
        self._stack.set_visible_child_name("home")

    def show_config(self) -> None:
        self._settings.load()
        self._stack.set_visible_child_name("config")

    def _on_toggle_config(self, _action, _param) -> None:
        if self._stack.get_visible_child_name() == "home":
            self.show_config()
        else:
            self.show_home()

    # ── Signal handlers ───────────────────────────────────────────────────

    def _on_link_activated(self, _view, entry) -> None:
        from hermes.backend.browser import BrowserError, open_link

        try:
            open_link(entry.link, self._bridge.get_config())
        except BrowserError as exc:
            log.error("Failed to open %s: %s", entry.link, exc)
            self._show_toast(f"Failed to open {entry.label or 'link'}")

    def _on_config_saved(self, ok: bool) -> None:
        self._show_toast("Config saved" if ok else "Could not save config")

    def _on_update_available(self, info: UpdateInfo) -> None:
        self._show_toast(f"Update available: v{info.version}")

    def _on_update_downloaded(self, info: UpdateInfo) -> None:
        self._show_toast(
            f"Update downloaded: v{info.version}. "
            "It will be installed when you restart the app."
        )

    def _on_update_error(self, error) -> None:
        log.warning("Update failed: %s", error)

    def _on_close_request(self, _window) -> bool:
        events = ("update-available", "update-downloaded", "update-error")
        for event, cb in zip(events, self._update_callbacks):
            self._bridge.notifications.unsubscribe(event, cb)
        self._update_callbacks = []
        self._bridge.store.close()
        return False

    def _show_toast(self, message: str) -> None:
        self._toast_overlay.add_toast(Adw.Toast(title=message))
