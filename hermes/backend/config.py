"""Persistent launcher configuration.

Stored as a JSON file in the user's XDG data directory:

    ~/.local/share/hermes/config.json

Schema::

    {
      "buttons": [
        {
          "img": "/home/kiosk/.local/share/hermes/uploads/button_1718000000000.png",
          "link": "https://intranet.example.org",
          "label": "Intranet"
        }
      ],
      "backgroundImage": "",          // absolute path, or empty
      "fullscreen": false,
      "windowWidth": 800,
      "windowHeight": 600,
      "chromeExecutablePath": "",     // browser to spawn for links, or empty
      "chromeArgs": ""                // space-separated extra arguments
    }

Every key is optional; absent keys fall back to ``DEFAULT_CONFIG`` when read.
Keys this module does not know about are kept as-is and written back on
every save.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path

from hermes.models.button import ButtonEntry

log = logging.getLogger(__name__)

CONFIG_FILE = "config.json"

DEFAULT_CONFIG: dict = {
    "buttons": [],
    "backgroundImage": "",
    "fullscreen": False,
    "windowWidth": 800,
    "windowHeight": 600,
    "chromeExecutablePath": "",
    "chromeArgs": "",
}

_MISSING = object()


class ConfigError(Exception):
    """Raised when config.json cannot be parsed or written."""


def data_dir() -> Path:
    """Return (and create if needed) the Hermes data directory."""
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "share"
    d = base / "hermes"
    d.mkdir(parents=True, exist_ok=True)
    return d


def default_config() -> dict:
    """Return a fresh copy of the default document."""
    return copy.deepcopy(DEFAULT_CONFIG)


class ConfigStore:
    """Owns config.json and the most recently loaded copy of it.

    Every disk operation is blocking and completes before the method
    returns.  There is no locking: concurrent writers race at the file
    level and the last ``os.replace`` wins, but a reader never sees a
    partially written file.
    """

    def __init__(self, directory: Path | str, file_name: str = CONFIG_FILE) -> None:
        self._dir = Path(directory)
        self._file_name = file_name
        self._document: dict = default_config()

    @property
    def path(self) -> Path:
        return self._dir / self._file_name

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def initialize(self) -> None:
        """Load config.json, creating it with defaults on first run.

        Safe to call repeatedly; each call re-reads the file.  If the file
        holds malformed JSON the in-memory document falls back to the
        defaults and ``ConfigError`` is raised.  The broken file is left
        on disk until something saves explicitly.
        """
        self._dir.mkdir(parents=True, exist_ok=True)
        try:
            self._document = self._read()
        except FileNotFoundError:
            log.info("No config at %s; writing defaults", self.path)
            self._document = default_config()
            self._write(self._document)
        except ConfigError:
            self._document = default_config()
            raise

    def close(self) -> None:
        """Forget the in-memory document."""
        self._document = default_config()

    # ── Reading ───────────────────────────────────────────────────────────

    def get_all(self) -> dict:
        """Return a copy of the current in-memory document."""
        return copy.deepcopy(self._document)

    def get(self, key: str, default=_MISSING):
        """Return the value stored under *key*.

        Falls back to *default* when the key is absent or ``None``, or to
        the documented default for known keys when *default* is omitted.
        """
        value = self._document.get(key)
        if value is not None:
            return copy.deepcopy(value)
        if default is _MISSING:
            return copy.deepcopy(DEFAULT_CONFIG.get(key))
        return default

    def buttons(self) -> list[ButtonEntry]:
        """Return the configured buttons in display order."""
        raw = self.get("buttons")
        if not isinstance(raw, list):
            log.warning("Ignoring non-list 'buttons' value: %r", raw)
            return []
        return [ButtonEntry.from_dict(b) for b in raw if isinstance(b, dict)]

    def window_size(self) -> tuple[int, int]:
        """Return ``(width, height)``, replacing unusable values with defaults."""
        return (
            _positive_int(self.get("windowWidth"), DEFAULT_CONFIG["windowWidth"]),
            _positive_int(self.get("windowHeight"), DEFAULT_CONFIG["windowHeight"]),
        )

    def is_fullscreen(self) -> bool:
        return self.get("fullscreen") is True

    # ── Writing ───────────────────────────────────────────────────────────

    def set(self, key: str, value) -> None:
        """Store *value* under *key* and write the whole document."""
        self._document[key] = value
        self._write(self._document)

    def save(self, document: dict) -> None:
        """Replace the whole document and write it."""
        if not isinstance(document, dict):
            raise ConfigError(f"Config document must be an object, got {type(document).__name__}")
        self._document = copy.deepcopy(document)
        self._write(self._document)

    # ── Low-level read/write ──────────────────────────────────────────────

    def _read(self) -> dict:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except OSError as exc:
            raise ConfigError(f"Could not read {self.path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Malformed JSON in {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data: dict) -> None:
        """Atomically replace config.json with *data*."""
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                prefix=f".{self._file_name}.", suffix=".tmp", dir=self._dir
            )
        except OSError as exc:
            raise ConfigError(f"Could not write {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as exc:
            raise ConfigError(f"Could not write {self.path}: {exc}") from exc
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)


def _positive_int(value, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    try:
        n = int(value)
    except (TypeError, ValueError):
        return fallback
    return n if n > 0 else fallback
