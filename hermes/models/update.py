"""Payloads carried by the update-lifecycle notifications."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UpdateInfo:
    """Release metadata for ``update-available`` / ``update-downloaded``."""

    version: str
    release_date: str = ""
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "UpdateInfo":
        extra = {k: v for k, v in data.items() if k not in ("version", "releaseDate")}
        return cls(
            version=str(data.get("version", "")),
            release_date=str(data.get("releaseDate") or ""),
            extra=extra,
        )


@dataclass(frozen=True, slots=True)
class ProgressInfo:
    """Download progress for ``update-progress``."""

    percent: float
    bytes_per_second: int = 0
    total: int = 0
    transferred: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressInfo":
        return cls(
            percent=float(data.get("percent", 0.0)),
            bytes_per_second=int(data.get("bytesPerSecond") or 0),
            total=int(data.get("total") or 0),
            transferred=int(data.get("transferred") or 0),
        )
