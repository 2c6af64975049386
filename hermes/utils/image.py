"""Image helpers for turning stored uploads into something GTK can draw.

Button and background images reach the views as ``data:`` URLs from the
bridge.  :func:`decode_data_url` is plain Python; the texture helpers
import GDK lazily and return ``None`` on any error so a broken image never
takes a view down.
"""

from __future__ import annotations

import base64
import binascii

_DATA_PREFIX = "data:"


def decode_data_url(url: str) -> tuple[str, bytes] | None:
    """Split a base64 ``data:`` URL into ``(mime_type, payload)``.

    Returns ``None`` for an empty string, a non-``data:`` URL, a URL that
    is not base64-encoded, or an undecodable payload.
    """
    if not url or not url.startswith(_DATA_PREFIX):
        return None
    header, sep, body = url[len(_DATA_PREFIX):].partition(",")
    if not sep or not header.endswith(";base64"):
        return None
    try:
        payload = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError):
        return None
    return header[: -len(";base64")], payload


def texture_from_data_url(url: str):
    """Return a ``Gdk.Texture`` for *url*, or ``None`` if it cannot be loaded.

    The declared MIME type is ignored; GdkPixbuf sniffs the payload, so a
    ``.jpg`` stored as ``image/jpg`` still loads.
    """
    decoded = decode_data_url(url)
    if decoded is None:
        return None
    _mime, payload = decoded
    try:
        from gi.repository import Gdk, GdkPixbuf

        loader = GdkPixbuf.PixbufLoader()
        loader.write(payload)
        loader.close()
        pixbuf = loader.get_pixbuf()
        if pixbuf is None:
            return None
        return Gdk.Texture.new_for_pixbuf(pixbuf)
    except Exception:
        return None


def load_fit_texture(url: str, target_h: int):
    """Load *url* and scale to *target_h* pixels, preserving aspect ratio.

    Uses ``GdkPixbuf.InterpType.HYPER`` for a sharp downscale of large
    button art.  Returns a ``Gdk.Texture`` or ``None`` on any error.
    """
    decoded = decode_data_url(url)
    if decoded is None:
        return None
    try:
        from gi.repository import Gdk, GdkPixbuf

        loader = GdkPixbuf.PixbufLoader()
        loader.write(decoded[1])
        loader.close()
        src = loader.get_pixbuf()
        src_w, src_h = src.get_width(), src.get_height()
        scaled_w = max(1, round(src_w * target_h / src_h))
        scaled = src.scale_simple(scaled_w, target_h, GdkPixbuf.InterpType.HYPER)
        return Gdk.Texture.new_for_pixbuf(scaled)
    except Exception:
        return None
