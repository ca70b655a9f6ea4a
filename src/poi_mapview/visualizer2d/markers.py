# markers.py
from __future__ import annotations
from typing import List, Optional, Set, Tuple

from poi_mapview.i18n import _
from poi_mapview.model.models import PointAnnotation


class CalloutButton:
    """Accessory shown inside a callout. Only 'info' is drawn today."""

    def __init__(self, kind: str = "info"):
        self.kind = kind
        self.is_accessibility_element = False
        self.accessibility_traits: Set[str] = {"button"}
        self.owner: Optional["AnnotationView"] = None

    @property
    def accessibility_label(self) -> str:
        title = self.owner.accessibility_label if self.owner is not None else None
        return f"{_('More Info')}, {title}" if title else _("More Info")

    def glyph(self) -> str:
        # plain text so the default DejaVu Sans has every glyph
        return "(i)" if self.kind == "info" else "›"

    def __repr__(self):
        return f"CalloutButton(kind={self.kind!r})"


class AnnotationView:
    """
    The on-screen element bound to one annotation while it is inside the
    visible region. Instances are pooled and rebound by the map surface.
    """

    zorder = 6

    def __init__(self, annotation: Optional[PointAnnotation] = None,
                 reuse_identifier: Optional[str] = None):
        self.annotation = annotation
        self.reuse_identifier = reuse_identifier
        self.can_show_callout = False
        self.is_accessibility_element = True
        self.accessibility_traits: Set[str] = set()
        self.selected = False
        self.focused = False
        self._accessory: Optional[CalloutButton] = None
        self._ax = None
        self._xy: Optional[Tuple[float, float]] = None
        self._body: List = []
        self._callout = None
        self._ring = None

    # --- accessibility ---

    @property
    def accessibility_label(self) -> Optional[str]:
        return self.annotation.title if self.annotation is not None else None

    @property
    def right_callout_accessory(self) -> Optional[CalloutButton]:
        return self._accessory

    @right_callout_accessory.setter
    def right_callout_accessory(self, accessory: Optional[CalloutButton]) -> None:
        if self._accessory is not None:
            self._accessory.owner = None
        self._accessory = accessory
        if accessory is not None:
            accessory.owner = self

    # --- lifecycle ---

    @property
    def is_attached(self) -> bool:
        return self._ax is not None

    def attach(self, ax, xy: Tuple[float, float]) -> None:
        self.detach()
        self._ax, self._xy = ax, xy
        self._body = self._draw_body(ax, xy)
        if self.selected:
            self._show_callout()
        if self.focused:
            self._show_ring()

    def detach(self) -> None:
        for artist in self._body:
            artist.remove()
        self._body = []
        self._hide_callout()
        self._hide_ring()
        self._ax, self._xy = None, None

    def prepare_for_reuse(self) -> None:
        self.detach()
        self.annotation = None
        self.selected = False
        self.focused = False
        self.can_show_callout = False
        self.is_accessibility_element = True
        self.accessibility_traits = set()
        self.right_callout_accessory = None

    def hit_test(self, mouseevent) -> bool:
        return any(artist.contains(mouseevent)[0] for artist in self._body)

    # --- state ---

    def set_selected(self, selected: bool) -> None:
        self.selected = selected
        if selected and self.is_attached:
            self._show_callout()
        else:
            self._hide_callout()

    def set_focused(self, focused: bool) -> None:
        self.focused = focused
        if focused and self.is_attached:
            self._show_ring()
        else:
            self._hide_ring()

    # --- drawing ---

    def _draw_body(self, ax, xy) -> List:
        raise NotImplementedError

    def _show_callout(self) -> None:
        self._hide_callout()
        if not self.can_show_callout or self.annotation is None:
            return
        text = self.annotation.title or ""
        if self._accessory is not None:
            text = f"{text}  {self._accessory.glyph()}"
        self._callout = self._ax.annotate(
            text, self._xy,
            xytext=(0, 22), textcoords="offset points",
            ha="center", fontsize=11,
            bbox=dict(boxstyle="round,pad=0.35", fc="white", ec="gray", alpha=0.95),
            zorder=self.zorder + 2,
        )

    def _hide_callout(self) -> None:
        if self._callout is not None:
            self._callout.remove()
            self._callout = None

    def _show_ring(self) -> None:
        self._hide_ring()
        x, y = self._xy
        self._ring, = self._ax.plot(
            [x], [y], marker="o", markersize=26,
            mfc="none", mec="black", mew=3, zorder=self.zorder + 1,
        )

    def _hide_ring(self) -> None:
        if self._ring is not None:
            self._ring.remove()
            self._ring = None

    def __repr__(self):
        title = self.accessibility_label
        return f"{type(self).__name__}({title!r})"


class MarkerAnnotationView(AnnotationView):
    """Balloon-style pin with its title underneath."""

    def _draw_body(self, ax, xy) -> List:
        x, y = xy
        pin, = ax.plot([x], [y], marker="v", markersize=14,
                       mec="white", mfc="crimson", mew=1.5, zorder=self.zorder)
        label = ax.annotate(self.accessibility_label or "", xy,
                            xytext=(0, -16), textcoords="offset points",
                            ha="center", va="top", fontsize=9,
                            color="black", zorder=self.zorder)
        return [pin, label]


class UserLocationView(AnnotationView):
    """Default view for the live-location marker."""

    def _draw_body(self, ax, xy) -> List:
        x, y = xy
        dot, = ax.plot([x], [y], marker="o", markersize=10,
                       mec="white", mfc="dodgerblue", mew=2, zorder=self.zorder)
        return [dot]
