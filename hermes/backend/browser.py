"""Opening button links.

Two routes, chosen per click from the current config:

* ``chromeExecutablePath`` set: spawn that executable directly as
  ``<executable> <chromeArgs...> <url>``, detached from Hermes so closing
  the launcher does not take the browser down with it.
* otherwise: hand the URL to the desktop's default handler through GIO.
"""

from __future__ import annotations

import logging
import subprocess

log = logging.getLogger(__name__)


class BrowserError(Exception):
    """Raised when a link could not be handed to any browser."""


def build_command(url: str, executable: str, args: str = "") -> list[str]:
    """Return the argv for launching *executable* on *url*.

    *args* is split on whitespace; quoting is not interpreted.
    """
    return [executable, *args.split(), url]


def open_link(url: str, config: dict) -> bool:
    """Open *url* using the browser configured in *config*.

    Returns ``False`` for an empty URL.  Raises ``BrowserError`` when the
    launch itself fails.
    """
    if not url:
        log.warning("Attempted to open an empty link")
        return False

    executable = (config.get("chromeExecutablePath") or "").strip()
    if executable:
        cmd = build_command(url, executable, config.get("chromeArgs") or "")
        log.info("Launching %s", cmd)
        try:
            subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise BrowserError(f"Could not start {executable}: {exc}") from exc
        return True

    import gi

    gi.require_version("Gio", "2.0")
    from gi.repository import Gio, GLib

    log.info("Opening %s with the default handler", url)
    try:
        Gio.AppInfo.launch_default_for_uri(url, None)
    except GLib.Error as exc:
        raise BrowserError(f"Could not open {url}: {exc.message}") from exc
    return True
