"""Home screen: full-window background image with a row of link buttons."""

from __future__ import annotations

import logging

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, GObject, Gtk, Pango

from hermes.models.button import ButtonEntry
from hermes.utils.image import texture_from_data_url

log = logging.getLogger(__name__)

_BUTTON_SIZE = 168


# ---------------------------------------------------------------------------
# _FixedBox: single-child container with a hard-coded natural size
# ---------------------------------------------------------------------------

class _FixedBox(Gtk.Widget):
    """Single-child container that always reports a fixed natural size.

    A ``Gtk.Picture`` reports the image's pixel dimensions as its natural
    size, which would let a large upload blow a button up to full
    resolution.  This box always measures ``width × height`` and gives the
    whole area to its child, so GTK scales the image at display density.
    """

    __gtype_name__ = "HermesFixedBox"

    def __init__(self, width: int, height: int) -> None:
        super().__init__()
        self._w = width
        self._h = height
        self._child: Gtk.Widget | None = None
        self.set_overflow(Gtk.Overflow.HIDDEN)

    def set_child(self, child: Gtk.Widget | None) -> None:
        if self._child is not None:
            self._child.unparent()
        self._child = child
        if child is not None:
            child.set_parent(self)

    # GTK virtual methods ──────────────────────────────────────────────────

    def do_measure(self, orientation, for_size):
        size = self._w if orientation == Gtk.Orientation.HORIZONTAL else self._h
        return size, size, -1, -1

    def do_size_allocate(self, width: int, height: int, baseline: int) -> None:
        if self._child is not None:
            self._child.allocate(width, height, baseline, None)

    def do_snapshot(self, snapshot) -> None:
        if self._child is not None:
            self.snapshot_child(self._child, snapshot)

    def do_dispose(self) -> None:
        if self._child is not None:
            self._child.unparent()
            self._child = None
        super().do_dispose()


# ---------------------------------------------------------------------------
# LinkTile
# ---------------------------------------------------------------------------

class LinkTile(Gtk.FlowBoxChild):
    """One square button with its label underneath."""

    def __init__(self, entry: ButtonEntry, image_url: str) -> None:
        super().__init__()
        self.entry = entry
        self.set_margin_start(8)
        self.set_margin_end(8)

        box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=4)

        card = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        card.add_css_class("card")
        card.set_overflow(Gtk.Overflow.HIDDEN)
        card.set_tooltip_text(entry.link)
        img_area = _FixedBox(_BUTTON_SIZE, _BUTTON_SIZE)
        card.append(img_area)

        texture = texture_from_data_url(image_url) if image_url else None
        if texture is not None:
            pic = Gtk.Picture.new_for_paintable(texture)
            pic.set_content_fit(Gtk.ContentFit.CONTAIN)
            pic.set_can_shrink(True)
            img_area.set_child(pic)
        else:
            # Placeholder art for a missing or unreadable image.
            icon = Gtk.Image.new_from_icon_name("image-missing-symbolic")
            icon.set_pixel_size(64)
            icon.add_css_class("dim-label")
            img_area.set_child(icon)
        box.append(card)

        label = Gtk.Label(label=entry.label)
        label.add_css_class("heading")
        label.set_ellipsize(Pango.EllipsizeMode.END)
        label.set_max_width_chars(18)
        box.append(label)

        self.set_child(box)


# ---------------------------------------------------------------------------
# HomeView
# ---------------------------------------------------------------------------

class HomeView(Gtk.Overlay):
    """Background picture with the button row pinned to the bottom centre."""

    __gsignals__ = {
        # Emitted when a button is clicked; carries the ButtonEntry.
        "link-activated": (GObject.SignalFlags.RUN_FIRST, None, (object,)),
        # Emitted from the empty state's "Open Configuration" button.
        "open-config": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    def __init__(self) -> None:
        super().__init__()

        self._background = Gtk.Picture()
        self._background.set_content_fit(Gtk.ContentFit.COVER)
        self._background.set_can_shrink(True)
        self._background.set_hexpand(True)
        self._background.set_vexpand(True)
        self.set_child(self._background)

        self._stack = Gtk.Stack()
        self._stack.set_valign(Gtk.Align.END)
        self._stack.set_halign(Gtk.Align.CENTER)
        self._stack.set_margin_bottom(32)
        self._stack.set_transition_type(Gtk.StackTransitionType.CROSSFADE)
        self.add_overlay(self._stack)

        self._flow_box = Gtk.FlowBox()
        self._flow_box.set_selection_mode(Gtk.SelectionMode.NONE)
        self._flow_box.set_homogeneous(True)
        self._flow_box.set_max_children_per_line(8)
        self._flow_box.set_row_spacing(16)
        self._flow_box.set_halign(Gtk.Align.CENTER)
        self._flow_box.connect("child-activated", self._on_tile_activated)
        self._stack.add_named(self._flow_box, "buttons")

        self._status = Adw.StatusPage(
            icon_name="view-grid-symbolic",
            title="No quick links added yet",
            description="Add some buttons in the configuration screen.",
        )
        self._status.add_css_class("compact")
        open_btn = Gtk.Button(label="Open Configuration")
        open_btn.add_css_class("pill")
        open_btn.set_halign(Gtk.Align.CENTER)
        open_btn.connect("clicked", lambda _b: self.emit("open-config"))
        self._status.set_child(open_btn)
        self._stack.add_named(self._status, "empty")
        self._stack.set_visible_child_name("empty")

    # ── Public API ────────────────────────────────────────────────────────

    def load(self, bridge) -> None:
        """Rebuild the screen from the bridge's current config."""
        cfg = bridge.get_config()

        background = cfg.get("backgroundImage") or ""
        url = bridge.read_image_as_data_url(background) if background else ""
        texture = texture_from_data_url(url) if url else None
        if background and texture is None:
            log.warning("Background image %s could not be loaded", background)
        self._background.set_paintable(texture)

        raw = cfg.get("buttons")
        entries = [
            ButtonEntry.from_dict(b) for b in (raw if isinstance(raw, list) else [])
            if isinstance(b, dict)
        ]
        self._clear()
        for entry in entries:
            image_url = bridge.read_image_as_data_url(entry.img) if entry.img else ""
            self._flow_box.append(LinkTile(entry, image_url))
        self._flow_box.set_min_children_per_line(min(max(len(entries), 1), 8))
        self._stack.set_visible_child_name("buttons" if entries else "empty")

    # ── Internals ─────────────────────────────────────────────────────────

    def _clear(self) -> None:
        while (child := self._flow_box.get_first_child()) is not None:
            self._flow_box.remove(child)

    def _on_tile_activated(self, _flow_box: Gtk.FlowBox, child: LinkTile) -> None:
        log.debug("Link activated: %s", child.entry.link)
        self.emit("link-activated", child.entry)
