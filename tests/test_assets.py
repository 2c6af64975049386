"""Tests for hermes/backend/assets.py."""

from __future__ import annotations

import base64
import re
from pathlib import Path

import pytest

from hermes.backend import assets as a

# 1×1 PNG.
_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


# ---------------------------------------------------------------------------
# make_asset_name
# ---------------------------------------------------------------------------

def test_make_asset_name_button():
    assert a.make_asset_name("button", "logo.png", now=1.5) == "button_1500.png"


def test_make_asset_name_background_uses_last_extension():
    assert a.make_asset_name("background", "/tmp/wall.paper.JPEG", now=2) == "background_2000.JPEG"


def test_make_asset_name_without_extension():
    assert a.make_asset_name("button", "README", now=0) == "button_0."


def test_make_asset_name_rejects_unknown_category():
    with pytest.raises(ValueError, match="category"):
        a.make_asset_name("icon", "x.png")


def test_make_asset_name_uses_current_time():
    name = a.make_asset_name("button", "x.png")
    assert re.fullmatch(r"button_\d{13}\.png", name)


# ---------------------------------------------------------------------------
# save_image
# ---------------------------------------------------------------------------

def test_save_image_creates_uploads_dir(tmp_path):
    mgr = a.AssetManager(tmp_path / "uploads")
    path = mgr.save_image("button_1000.png", _PNG)
    assert path.endswith(str(Path("uploads") / "button_1000.png"))
    assert Path(path).is_absolute()
    assert Path(path).read_bytes() == _PNG


def test_save_image_accepts_bytearray(tmp_path):
    mgr = a.AssetManager(tmp_path / "uploads")
    path = mgr.save_image("button_1.bin", bytearray(b"\x00\x01\x02"))
    assert Path(path).read_bytes() == b"\x00\x01\x02"


def test_save_image_overwrites_same_name(tmp_path):
    mgr = a.AssetManager(tmp_path / "uploads")
    mgr.save_image("button_1.png", b"first")
    path = mgr.save_image("button_1.png", b"second")
    assert Path(path).read_bytes() == b"second"


@pytest.mark.parametrize("name", ["", "../escape.png", "sub/dir.png"])
def test_save_image_rejects_bad_names(tmp_path, name):
    mgr = a.AssetManager(tmp_path / "uploads")
    with pytest.raises(ValueError):
        mgr.save_image(name, b"x")


# ---------------------------------------------------------------------------
# read_as_data_url
# ---------------------------------------------------------------------------

def test_read_as_data_url_png(tmp_path):
    img = tmp_path / "pic.png"
    img.write_bytes(_PNG)
    url = a.AssetManager(tmp_path).read_as_data_url(str(img))
    assert re.fullmatch(r"data:image/png;base64,[A-Za-z0-9+/=]+", url)
    assert base64.b64decode(url.split(",", 1)[1]) == _PNG


def test_read_as_data_url_extension_taken_verbatim(tmp_path):
    img = tmp_path / "photo.jpg"
    img.write_bytes(_PNG)
    url = a.AssetManager(tmp_path).read_as_data_url(img)
    assert url.startswith("data:image/jpg;base64,")


def test_read_as_data_url_no_extension(tmp_path):
    img = tmp_path / "noext"
    img.write_bytes(b"abc")
    url = a.AssetManager(tmp_path).read_as_data_url(img)
    assert url == "data:image/;base64,YWJj"


def test_read_as_data_url_empty_path(tmp_path):
    assert a.AssetManager(tmp_path).read_as_data_url("") == ""


def test_read_as_data_url_missing_file(tmp_path):
    assert a.AssetManager(tmp_path).read_as_data_url(str(tmp_path / "nope.png")) == ""


def test_read_as_data_url_directory(tmp_path):
    assert a.AssetManager(tmp_path).read_as_data_url(str(tmp_path)) == ""
