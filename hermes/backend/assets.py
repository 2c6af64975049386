"""Uploaded image storage.

Images picked in the configuration screen are copied into a flat
``uploads/`` folder next to config.json so the launcher keeps working if
the originals move:

    ~/.local/share/hermes/uploads/button_1718000000000.png
    ~/.local/share/hermes/uploads/background_1718000000123.jpg

Stored files are never modified or cleaned up; an image whose button was
removed stays on disk.
"""

from __future__ import annotations

import base64
import logging
import os
import time
from pathlib import Path

log = logging.getLogger(__name__)

UPLOADS_DIR = "uploads"

CATEGORIES: frozenset[str] = frozenset({"button", "background"})


def make_asset_name(category: str, original_name: str, now: float | None = None) -> str:
    """Return ``<category>_<epoch-millis>.<ext>`` for an upload.

    *ext* is whatever follows the last dot in *original_name*, taken
    verbatim.  A name without a dot yields an empty extension, not the
    whole name.
    """
    if category not in CATEGORIES:
        raise ValueError(f"Unknown asset category: {category!r}")
    millis = int((time.time() if now is None else now) * 1000)
    _, dot, ext = Path(original_name).name.rpartition(".")
    return f"{category}_{millis}.{ext if dot else ''}"


class AssetManager:
    """Writes uploads into, and reads images back out of, the uploads folder."""

    def __init__(self, uploads_dir: Path | str) -> None:
        self._dir = Path(uploads_dir)

    @property
    def uploads_dir(self) -> Path:
        return self._dir

    def save_image(self, file_name: str, data: bytes) -> str:
        """Write *data* verbatim to ``<uploads>/<file_name>``.

        Returns the absolute path written.  An existing file of the same
        name is overwritten; callers generate unique names with
        :func:`make_asset_name`.
        """
        if not file_name or os.sep in file_name or (os.altsep and os.altsep in file_name):
            raise ValueError(f"Invalid upload file name: {file_name!r}")
        self._dir.mkdir(parents=True, exist_ok=True)
        dest = self._dir / file_name
        dest.write_bytes(bytes(data))
        log.info("Saved upload %s (%d bytes)", dest, len(data))
        return str(dest.resolve())

    def read_as_data_url(self, path: Path | str) -> str:
        """Return the file at *path* as ``data:image/<ext>;base64,<data>``.

        Returns ``""`` when *path* is empty, missing or unreadable; callers
        treat that as "no image".  The MIME subtype is the file extension
        without sniffing, so ``photo.jpg`` gives ``image/jpg``.
        """
        if not path:
            return ""
        p = Path(path)
        try:
            data = p.read_bytes()
        except OSError as exc:
            log.debug("Could not read image %s: %s", p, exc)
            return ""
        ext = p.suffix[1:]
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:image/{ext};base64,{encoded}"
