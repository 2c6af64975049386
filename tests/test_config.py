"""Tests for hermes/backend/config.py."""

from __future__ import annotations

import json
import threading
from unittest.mock import patch

import pytest

from hermes.backend import config as cfg
from hermes.models.button import ButtonEntry


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _store(tmp_path):
    return cfg.ConfigStore(tmp_path / "hermes")


def _write(store, data):
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text(json.dumps(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# data_dir
# ---------------------------------------------------------------------------

def test_data_dir_uses_xdg_data_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    d = cfg.data_dir()
    assert d == tmp_path / "hermes"
    assert d.is_dir()


def test_data_dir_falls_back_to_home(tmp_path, monkeypatch):
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    with patch.object(cfg.Path, "home", return_value=tmp_path):
        d = cfg.data_dir()
    assert d == tmp_path / ".local" / "share" / "hermes"
    assert d.is_dir()


# ---------------------------------------------------------------------------
# initialize
# ---------------------------------------------------------------------------

def test_initialize_first_run_writes_defaults(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    assert store.path.is_file()
    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert on_disk == cfg.DEFAULT_CONFIG
    assert store.get_all() == cfg.DEFAULT_CONFIG


def test_initialize_writes_pretty_printed_json(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    text = store.path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "buttons": []')


def test_initialize_existing_directory_is_not_an_error(tmp_path):
    (tmp_path / "hermes").mkdir()
    store = _store(tmp_path)
    store.initialize()
    assert store.path.is_file()


def test_initialize_loads_existing_file(tmp_path):
    store = _store(tmp_path)
    _write(store, {"windowWidth": 1024, "custom": {"a": 1}})
    store.initialize()
    assert store.get_all() == {"windowWidth": 1024, "custom": {"a": 1}}


def test_initialize_is_idempotent_and_rereads(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    _write(store, {"fullscreen": True})
    store.initialize()
    assert store.get("fullscreen") is True


def test_initialize_malformed_raises_and_falls_back(tmp_path):
    store = _store(tmp_path)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(cfg.ConfigError, match="Malformed JSON"):
        store.initialize()
    assert store.get_all() == cfg.DEFAULT_CONFIG
    # The broken file is not repaired behind the user's back.
    assert store.path.read_text(encoding="utf-8") == "{not json"


def test_initialize_non_object_raises(tmp_path):
    store = _store(tmp_path)
    _write(store, [1, 2, 3])
    with pytest.raises(cfg.ConfigError, match="JSON object"):
        store.initialize()


# ---------------------------------------------------------------------------
# get / get_all
# ---------------------------------------------------------------------------

def test_get_returns_stored_value(tmp_path):
    store = _store(tmp_path)
    _write(store, {"windowHeight": 1080})
    store.initialize()
    assert store.get("windowHeight") == 1080


def test_get_missing_key_uses_explicit_default(tmp_path):
    store = _store(tmp_path)
    _write(store, {})
    store.initialize()
    assert store.get("windowHeight", 42) == 42


def test_get_missing_key_uses_documented_default(tmp_path):
    store = _store(tmp_path)
    _write(store, {})
    store.initialize()
    assert store.get("windowWidth") == 800
    assert store.get("buttons") == []
    assert store.get("unknown") is None


def test_get_null_value_counts_as_unset(tmp_path):
    store = _store(tmp_path)
    _write(store, {"chromeArgs": None})
    store.initialize()
    assert store.get("chromeArgs", "--kiosk") == "--kiosk"


def test_get_all_returns_copy(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    doc = store.get_all()
    doc["buttons"].append({"img": "x"})
    assert store.get("buttons") == []


def test_close_drops_document(tmp_path):
    store = _store(tmp_path)
    _write(store, {"fullscreen": True})
    store.initialize()
    store.close()
    assert store.get("fullscreen") is False


# ---------------------------------------------------------------------------
# Typed accessors
# ---------------------------------------------------------------------------

def test_buttons_returns_entries_in_order(tmp_path):
    store = _store(tmp_path)
    _write(store, {"buttons": [
        {"img": "/a.png", "link": "https://a", "label": "A"},
        {"img": "/b.png", "link": "https://b", "label": "B"},
        {"img": "/a.png", "link": "https://a", "label": "A"},
    ]})
    store.initialize()
    assert [b.label for b in store.buttons()] == ["A", "B", "A"]
    assert store.buttons()[0] == ButtonEntry("/a.png", "https://a", "A")


def test_buttons_ignores_garbage(tmp_path):
    store = _store(tmp_path)
    _write(store, {"buttons": "nope"})
    store.initialize()
    assert store.buttons() == []


@pytest.mark.parametrize("width,height,expected", [
    (1024, 768, (1024, 768)),
    ("1280", 720, (1280, 720)),
    (-5, 0, (800, 600)),
    (True, "tall", (800, 600)),
])
def test_window_size(tmp_path, width, height, expected):
    store = _store(tmp_path)
    _write(store, {"windowWidth": width, "windowHeight": height})
    store.initialize()
    assert store.window_size() == expected


def test_is_fullscreen_requires_true(tmp_path):
    store = _store(tmp_path)
    _write(store, {"fullscreen": "yes"})
    store.initialize()
    assert store.is_fullscreen() is False


# ---------------------------------------------------------------------------
# set / save
# ---------------------------------------------------------------------------

def test_set_writes_whole_document(tmp_path):
    store = _store(tmp_path)
    _write(store, {"windowWidth": 1024, "extra": "keep"})
    store.initialize()
    store.set("fullscreen", True)
    on_disk = json.loads(store.path.read_text(encoding="utf-8"))
    assert on_disk == {"windowWidth": 1024, "extra": "keep", "fullscreen": True}


def test_save_round_trip(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    doc = {
        "buttons": [{"img": "/u/button_1.png", "link": "https://x", "label": "Ünïcode"}],
        "backgroundImage": "/u/background_2.jpg",
        "fullscreen": True,
        "windowWidth": 1920,
        "windowHeight": 1080,
        "chromeExecutablePath": "/usr/bin/chromium",
        "chromeArgs": "--kiosk --incognito",
    }
    store.save(doc)
    fresh = _store(tmp_path)
    fresh.initialize()
    assert fresh.get_all() == doc
    assert "Ünïcode" in store.path.read_text(encoding="utf-8")


def test_save_rejects_non_dict(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    with pytest.raises(cfg.ConfigError):
        store.save(["not", "a", "dict"])


def test_save_replaces_whole_document(tmp_path):
    store = _store(tmp_path)
    _write(store, {"windowWidth": 1024, "legacy": 1})
    store.initialize()
    store.save({"fullscreen": True})
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"fullscreen": True}


def test_write_failure_raises_config_error(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    with patch.object(cfg.os, "replace", side_effect=OSError("disk full")):
        with pytest.raises(cfg.ConfigError, match="disk full"):
            store.set("fullscreen", True)
    # In-memory document is not rolled back; disk still holds the old state.
    assert store.get("fullscreen") is True
    assert json.loads(store.path.read_text(encoding="utf-8"))["fullscreen"] is False


def test_write_leaves_no_temp_files(tmp_path):
    store = _store(tmp_path)
    store.initialize()
    store.set("fullscreen", True)
    with patch.object(cfg.os, "replace", side_effect=OSError("boom")):
        with pytest.raises(cfg.ConfigError):
            store.set("fullscreen", False)
    assert sorted(p.name for p in store.path.parent.iterdir()) == ["config.json"]


def test_concurrent_saves_never_interleave(tmp_path):
    store_a = _store(tmp_path)
    store_b = _store(tmp_path)
    store_a.initialize()
    doc_a = {"label": "A" * 50_000, "buttons": []}
    doc_b = {"label": "B" * 50_000, "fullscreen": True}

    def _save(store, doc):
        for _ in range(20):
            store.save(doc)

    threads = [
        threading.Thread(target=_save, args=(store_a, doc_a)),
        threading.Thread(target=_save, args=(store_b, doc_b)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    on_disk = json.loads(store_a.path.read_text(encoding="utf-8"))
    assert on_disk in (doc_a, doc_b)
