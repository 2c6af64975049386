"""Tests for hermes/models/."""

from __future__ import annotations

import dataclasses

from hermes.models.button import ButtonEntry
from hermes.models.update import ProgressInfo, UpdateInfo


# ---------------------------------------------------------------------------
# ButtonEntry
# ---------------------------------------------------------------------------

def test_button_from_dict_fills_missing_fields():
    entry = ButtonEntry.from_dict({"label": "Mail"})
    assert entry == ButtonEntry(img="", link="", label="Mail")
    assert entry.is_complete is False


def test_button_from_dict_tolerates_nulls():
    assert ButtonEntry.from_dict({"img": None, "link": None, "label": None}) == ButtonEntry()


def test_button_to_dict():
    entry = ButtonEntry(img="/u/button_1.png", link="https://mail", label="Mail")
    assert entry.to_dict() == {"img": "/u/button_1.png", "link": "https://mail", "label": "Mail"}
    assert entry.is_complete is True


def test_button_keeps_unknown_keys():
    raw = {"img": "/u/button_1.png", "link": "https://mail", "label": "Mail", "color": "#336699"}
    entry = ButtonEntry.from_dict(raw)
    assert entry.extra == {"color": "#336699"}
    assert entry.to_dict() == raw


def test_button_edit_keeps_unknown_keys():
    entry = ButtonEntry.from_dict({"img": "/a.png", "link": "https://a", "label": "A", "order": 3})
    edited = dataclasses.replace(entry, label="Alpha")
    assert edited.to_dict() == {"img": "/a.png", "link": "https://a", "label": "Alpha", "order": 3}


def test_button_known_fields_win_over_extra():
    entry = ButtonEntry(label="New", extra={"label": "Old", "pinned": True})
    assert entry.to_dict()["label"] == "New"
    assert entry.to_dict()["pinned"] is True


# ---------------------------------------------------------------------------
# UpdateInfo / ProgressInfo
# ---------------------------------------------------------------------------

def test_update_info_keeps_extra_fields():
    info = UpdateInfo.from_dict({"version": "3.1.0", "releaseNotes": "Fixes", "files": []})
    assert info.version == "3.1.0"
    assert info.release_date == ""
    assert info.extra == {"releaseNotes": "Fixes", "files": []}


def test_progress_info_defaults():
    progress = ProgressInfo.from_dict({"percent": 7})
    assert progress == ProgressInfo(percent=7.0)
    assert progress.bytes_per_second == 0
