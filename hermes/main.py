"""GApplication entry point for Hermes."""

import logging
import os
import sys

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gio  # noqa: E402


class HermesApplication(Adw.Application):
    def __init__(self):
        super().__init__(
            application_id="io.github.hermes",
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS,
        )

    def do_startup(self):
        Adw.Application.do_startup(self)
        self.set_accels_for_action("win.toggle-config", ["<Control>i"])

    def do_activate(self):
        from hermes.window import HermesWindow

        win = self.props.active_window
        if not win:
            win = HermesWindow(application=self)
        win.present()


def main():
    logging.basicConfig(
        level=os.environ.get("HERMES_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = HermesApplication()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
