"""Boundary between the views and everything that touches the disk.

The views never call the config store or the asset manager directly;
they go through a :class:`Bridge`, which exposes a fixed catalogue of
request/response operations:

==========================  ===================  ==========================
Operation                   Input                Soft value on failure
==========================  ===================  ==========================
``get-config``              (none)               default document
``save-config``             full document        ``False``
``save-image``              file name, bytes     ``""``
``read-image-as-data-url``  absolute path        ``""``
``select-file``             FileSelectionOptions ``None``
==========================  ===================  ==========================

No operation raises.  :meth:`Bridge.invoke` returns a :class:`BridgeResult`
so callers can tell a failure apart from an empty success; the
convenience methods return only the value.

``save-config`` replaces the stored document with the one given, so a
document read back with ``get-config`` is exactly what was saved.  Callers
that change a few fields merge them onto ``get-config`` first.

Update-lifecycle notifications travel the other way, fire-and-forget,
through a :class:`NotificationHub`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from hermes.backend.assets import AssetManager
from hermes.backend.config import ConfigError, ConfigStore, default_config
from hermes.models.update import ProgressInfo, UpdateInfo

log = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    GET_CONFIG = "get-config"
    SAVE_CONFIG = "save-config"
    SAVE_IMAGE = "save-image"
    READ_IMAGE_AS_DATA_URL = "read-image-as-data-url"
    SELECT_FILE = "select-file"


class UpdateEvent(str, enum.Enum):
    CHECK_STARTED = "update-check-started"
    AVAILABLE = "update-available"
    PROGRESS = "update-progress"
    DOWNLOADED = "update-downloaded"
    ERROR = "update-error"


@dataclass(frozen=True, slots=True)
class BridgeResult:
    """Outcome of one bridge operation.

    ``value`` always holds something the caller can use: the real result
    on success, the operation's soft value on failure.
    """

    ok: bool
    value: Any = None
    error: str = ""

    @classmethod
    def success(cls, value: Any = None) -> "BridgeResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str, value: Any = None) -> "BridgeResult":
        return cls(ok=False, value=value, error=error)


@dataclass(frozen=True, slots=True)
class FileFilter:
    name: str
    extensions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FileSelectionOptions:
    """What to show in the native file picker."""

    title: str = ""
    default_path: str = ""
    button_label: str = ""
    filters: tuple[FileFilter, ...] = ()
    properties: tuple[str, ...] = ("openFile",)
    message: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "FileSelectionOptions":
        return cls(
            title=data.get("title", ""),
            default_path=data.get("defaultPath", ""),
            button_label=data.get("buttonLabel", ""),
            filters=tuple(
                FileFilter(f.get("name", ""), tuple(f.get("extensions", ())))
                for f in data.get("filters", ())
            ),
            properties=tuple(data.get("properties", ("openFile",))),
            message=data.get("message", ""),
        )


class FilePicker(Protocol):
    """Native file chooser.  Returns the chosen path, or ``None`` if cancelled."""

    def __call__(self, options: FileSelectionOptions) -> str | None: ...


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationHub:
    """Per-event subscriber lists for one-way notifications.

    A callback may be registered several times; each ``unsubscribe`` call
    removes one registration and leaves every other subscriber alone.
    """

    def __init__(self) -> None:
        self._subscribers: dict[UpdateEvent, list[Callable[[Any], None]]] = {
            ev: [] for ev in UpdateEvent
        }

    def subscribe(self, event: UpdateEvent | str, callback: Callable[[Any], None]):
        self._subscribers[UpdateEvent(event)].append(callback)
        return callback

    def unsubscribe(self, event: UpdateEvent | str, callback: Callable[[Any], None]) -> bool:
        """Remove one registration of *callback*.  Returns False if it had none."""
        subs = self._subscribers[UpdateEvent(event)]
        for i, cb in enumerate(subs):
            if cb == callback:
                del subs[i]
                return True
        return False

    def unsubscribe_all(self, event: UpdateEvent | str | None = None) -> None:
        events = UpdateEvent if event is None else (UpdateEvent(event),)
        for ev in events:
            self._subscribers[ev].clear()

    def subscriber_count(self, event: UpdateEvent | str) -> int:
        return len(self._subscribers[UpdateEvent(event)])

    def emit(self, event: UpdateEvent | str, payload: Any = None) -> None:
        """Deliver *payload* to every current subscriber of *event*.

        A failing subscriber is logged and skipped.
        """
        ev = UpdateEvent(event)
        for cb in list(self._subscribers[ev]):
            try:
                cb(payload)
            except Exception:
                log.exception("Subscriber %r failed on %s", cb, ev.value)


# ---------------------------------------------------------------------------
# Bridge
# ---------------------------------------------------------------------------

class Bridge:
    """Catalogue of request/response operations plus the notification hub."""

    def __init__(
        self,
        store: ConfigStore,
        assets: AssetManager,
        file_picker: FilePicker | None = None,
    ) -> None:
        self._store = store
        self._assets = assets
        self._file_picker = file_picker
        self.notifications = NotificationHub()
        self._handlers: dict[Operation, Callable[..., BridgeResult]] = {
            Operation.GET_CONFIG: self._get_config,
            Operation.SAVE_CONFIG: self._save_config,
            Operation.SAVE_IMAGE: self._save_image,
            Operation.READ_IMAGE_AS_DATA_URL: self._read_image_as_data_url,
            Operation.SELECT_FILE: self._select_file,
        }

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def assets(self) -> AssetManager:
        return self._assets

    def set_file_picker(self, file_picker: FilePicker | None) -> None:
        self._file_picker = file_picker

    # ── Dispatch ──────────────────────────────────────────────────────────

    def invoke(self, name: Operation | str, *args, **kwargs) -> BridgeResult:
        """Run the operation called *name*; never raises."""
        try:
            op = Operation(name)
        except ValueError:
            log.warning("Unknown bridge operation %r", name)
            return BridgeResult.failure(f"Unknown operation: {name!r}")
        try:
            return self._handlers[op](*args, **kwargs)
        except Exception as exc:
            log.exception("Bridge operation %s failed", op.value)
            return BridgeResult.failure(str(exc), _SOFT_VALUES[op]())

    def get_config(self) -> dict:
        return self.invoke(Operation.GET_CONFIG).value

    def save_config(self, document: dict) -> bool:
        return self.invoke(Operation.SAVE_CONFIG, document).value

    def save_image(self, file_name: str, data: bytes) -> str:
        return self.invoke(Operation.SAVE_IMAGE, file_name, data).value

    def read_image_as_data_url(self, path: str) -> str:
        return self.invoke(Operation.READ_IMAGE_AS_DATA_URL, path).value

    def select_file(self, options: FileSelectionOptions | dict | None = None) -> str | None:
        return self.invoke(Operation.SELECT_FILE, options).value

    # ── Operations ────────────────────────────────────────────────────────

    def _get_config(self) -> BridgeResult:
        try:
            self._store.initialize()
        except ConfigError as exc:
            log.error("Config could not be loaded, using defaults: %s", exc)
            return BridgeResult.failure(str(exc), self._store.get_all())
        return BridgeResult.success(self._store.get_all())

    def _save_config(self, document: dict) -> BridgeResult:
        try:
            self._store.save(document)
        except ConfigError as exc:
            log.error("Could not save config: %s", exc)
            return BridgeResult.failure(str(exc), False)
        return BridgeResult.success(True)

    def _save_image(self, file_name: str, data: bytes) -> BridgeResult:
        try:
            path = self._assets.save_image(file_name, data)
        except (OSError, ValueError) as exc:
            log.error("Could not save image %r: %s", file_name, exc)
            return BridgeResult.failure(str(exc), "")
        return BridgeResult.success(path)

    def _read_image_as_data_url(self, path: str) -> BridgeResult:
        url = self._assets.read_as_data_url(path)
        if not url:
            return BridgeResult.failure(f"No image at {path!r}", "")
        return BridgeResult.success(url)

    def _select_file(self, options: FileSelectionOptions | dict | None = None) -> BridgeResult:
        if self._file_picker is None:
            return BridgeResult.failure("No file picker available", None)
        if options is None:
            options = FileSelectionOptions()
        elif isinstance(options, dict):
            options = FileSelectionOptions.from_dict(options)
        return BridgeResult.success(self._file_picker(options))

    # ── Update notifications ──────────────────────────────────────────────

    def notify(self, event: UpdateEvent | str, payload: Any = None) -> None:
        """Push an update-lifecycle event to the views."""
        ev = UpdateEvent(event)
        if isinstance(payload, dict):
            if ev in (UpdateEvent.AVAILABLE, UpdateEvent.DOWNLOADED):
                payload = UpdateInfo.from_dict(payload)
            elif ev is UpdateEvent.PROGRESS:
                payload = ProgressInfo.from_dict(payload)
        log.debug("Update notification %s: %r", ev.value, payload)
        self.notifications.emit(ev, payload)

    def on_update_check_started(self, callback: Callable[[None], None]):
        return self.notifications.subscribe(UpdateEvent.CHECK_STARTED, callback)

    def on_update_available(self, callback: Callable[[UpdateInfo], None]):
        return self.notifications.subscribe(UpdateEvent.AVAILABLE, callback)

    def on_update_progress(self, callback: Callable[[ProgressInfo], None]):
        return self.notifications.subscribe(UpdateEvent.PROGRESS, callback)

    def on_update_downloaded(self, callback: Callable[[UpdateInfo], None]):
        return self.notifications.subscribe(UpdateEvent.DOWNLOADED, callback)

    def on_update_error(self, callback: Callable[[Any], None]):
        return self.notifications.subscribe(UpdateEvent.ERROR, callback)

    def remove_update_listeners(self) -> None:
        self.notifications.unsubscribe_all()


_SOFT_VALUES: dict[Operation, Callable[[], Any]] = {
    Operation.GET_CONFIG: default_config,
    Operation.SAVE_CONFIG: lambda: False,
    Operation.SAVE_IMAGE: lambda: "",
    Operation.READ_IMAGE_AS_DATA_URL: lambda: "",
    Operation.SELECT_FILE: lambda: None,
}
