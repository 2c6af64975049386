"""Quick-launch button entry, as stored in the ``buttons`` list of config.json."""

from __future__ import annotations

from dataclasses import dataclass, field

_FIELDS = ("img", "link", "label")


@dataclass(frozen=True, slots=True)
class ButtonEntry:
    """One button on the home screen.

    ``img`` is an absolute path to an uploaded image (usually inside the
    uploads directory), ``link`` is the URL opened on click.  Entries carry
    no identity of their own; the list position is the display order and
    duplicates are allowed.

    Keys Hermes does not know about are kept in ``extra`` and written back
    by ``to_dict``, so editing a button never drops them.
    """

    img: str = ""
    link: str = ""
    label: str = ""
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "ButtonEntry":
        return cls(
            img=str(data.get("img") or ""),
            link=str(data.get("link") or ""),
            label=str(data.get("label") or ""),
            extra={k: v for k, v in data.items() if k not in _FIELDS},
        )

    def to_dict(self) -> dict:
        return {**self.extra, "img": self.img, "link": self.link, "label": self.label}

    @property
    def is_complete(self) -> bool:
        """True when every field is filled in (required before saving)."""
        return bool(self.img and self.link and self.label)
