# map_surface.py
"""
Map surface on top of a matplotlib Axes.

Holds annotations and overlays in Web Mercator space, keeps a visible region
(center + span) and materializes one AnnotationView per annotation that lies
inside that region. Views are recycled through per-identifier reuse pools.

A delegate (duck-typed) may provide:
  - view_for_annotation(surface, annotation) -> AnnotationView | None
  - renderer_for_overlay(surface, overlay) -> CircleRenderer
  - did_select(surface, view) / did_deselect(surface, view)
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple, Type

from poi_mapview.i18n import _
from poi_mapview.model.models import Coordinate, CircleOverlay, PointAnnotation, UserLocation
from .markers import AnnotationView, MarkerAnnotationView, UserLocationView
from .basemap import Basemap
from .projection import WebMercatorProjection
from .renderer import CircleRenderer

logger = logging.getLogger(__name__)

XY = Tuple[float, float]


@dataclass
class _RegionAnimation:
    start_center: XY
    start_span: XY
    end_center: XY
    end_span: XY
    frames: int
    refresh_basemap: bool = False
    frame: int = 0
    timer: object = None

    def at(self, t: float) -> Tuple[XY, XY]:
        lerp = lambda a, b: a + (b - a) * t
        center = (lerp(self.start_center[0], self.end_center[0]),
                  lerp(self.start_center[1], self.end_center[1]))
        span = (lerp(self.start_span[0], self.end_span[0]),
                lerp(self.start_span[1], self.end_span[1]))
        return center, span


class MapSurface:
    DEFAULT_SPAN_M = 3000.0
    MIN_SPAN_M = 500.0
    FRAME_PADDING = 0.15       # share of the fitted span added on each side
    ANIMATION_FRAMES = 15
    ANIMATION_INTERVAL_MS = 20

    def __init__(self, ax, delegate=None, *,
                 projection: WebMercatorProjection | None = None,
                 basemap: Basemap | None = None):
        self.ax = ax
        self.figure = ax.figure
        self.delegate = delegate
        self.projection = projection or WebMercatorProjection()
        self.basemap = basemap
        self.accessibility_custom_rotors: list = []

        self._annotations: List[PointAnnotation] = []
        self._overlays: List[CircleOverlay] = []
        self._overlay_patches: Dict[int, object] = {}
        self._views: Dict[str, AnnotationView] = {}
        self._registry: Dict[str, Type[AnnotationView]] = {}
        self._reuse_pool: Dict[str, List[AnnotationView]] = {}
        self._selected: List[PointAnnotation] = []
        self._user_location: UserLocation | None = None
        self._animation: _RegionAnimation | None = None
        self._status = None

        self._center: XY = (0.0, 0.0)
        self._span: XY = (self.DEFAULT_SPAN_M, self.DEFAULT_SPAN_M)

        self.ax.set_autoscale_on(False)
        self.ax.set_aspect("equal", adjustable="box")
        self.ax.set_xticks([])
        self.ax.set_yticks([])
        self._cid_press = self.figure.canvas.mpl_connect("button_press_event", self._on_button_press)
        self._apply_region()

    # --- annotations ----------------------------------------------------

    @property
    def annotations(self) -> List[PointAnnotation]:
        """All annotations: the live-location marker first, the rest in insertion order."""
        return list(self._annotations)

    def add_annotation(self, annotation: PointAnnotation) -> None:
        self._insert(len(self._annotations), annotation)

    def _insert(self, index: int, annotation: PointAnnotation) -> None:
        self._annotations.insert(index, annotation)
        if self._is_visible(annotation):
            self._materialize(annotation)
            self.request_redraw()

    def add_annotations(self, annotations: Iterable[PointAnnotation]) -> None:
        for a in annotations:
            self.add_annotation(a)

    def remove_annotation(self, annotation: PointAnnotation) -> None:
        if annotation not in self._annotations:
            return
        self.deselect_annotation(annotation)
        self._recycle(annotation)
        self._annotations.remove(annotation)
        self.request_redraw()

    # --- user location --------------------------------------------------

    @property
    def user_location(self) -> UserLocation | None:
        return self._user_location

    @property
    def shows_user_location(self) -> bool:
        return self._user_location is not None

    def set_user_location(self, coordinate: Coordinate | None) -> None:
        """Show the live-location marker at `coordinate`; None hides it."""
        if self._user_location is not None:
            self.remove_annotation(self._user_location)
            self._user_location = None
        if coordinate is not None:
            self._user_location = UserLocation(title=_("My Location"), coordinate=coordinate)
            # the live-location marker always leads the list
            self._insert(0, self._user_location)

    # --- overlays -------------------------------------------------------

    @property
    def overlays(self) -> List[CircleOverlay]:
        return list(self._overlays)

    def add_overlay(self, overlay: CircleOverlay) -> None:
        renderer = self._delegate_call("renderer_for_overlay", overlay)
        if renderer is None:
            renderer = CircleRenderer()
        patch = renderer.make_patch(overlay, self.projection)
        self.ax.add_patch(patch)
        self._overlays.append(overlay)
        self._overlay_patches[id(overlay)] = patch
        self.request_redraw()

    def patch_for(self, overlay: CircleOverlay):
        return self._overlay_patches.get(id(overlay))

    # --- views ----------------------------------------------------------

    def register(self, view_class: Type[AnnotationView], reuse_identifier: str) -> None:
        self._registry[reuse_identifier] = view_class
        self._reuse_pool.setdefault(reuse_identifier, [])

    def dequeue_reusable_annotation_view(self, reuse_identifier: str,
                                         annotation: PointAnnotation) -> AnnotationView:
        if reuse_identifier not in self._registry:
            raise ValueError(f"no view class registered for reuse identifier '{reuse_identifier}'")
        pool = self._reuse_pool[reuse_identifier]
        if pool:
            view = pool.pop()
        else:
            view = self._registry[reuse_identifier](reuse_identifier=reuse_identifier)
        view.annotation = annotation
        return view

    def view_for(self, annotation: PointAnnotation) -> AnnotationView | None:
        return self._views.get(annotation.annotation_id)

    def _materialize(self, annotation: PointAnnotation) -> AnnotationView:
        view = self._delegate_call("view_for_annotation", annotation)
        if view is None:
            if isinstance(annotation, UserLocation):
                view = UserLocationView(annotation)
            else:
                view = MarkerAnnotationView(annotation)
        view.annotation = annotation
        view.selected = annotation in self._selected
        view.attach(self.ax, self.projection.to_xy(annotation.coordinate))
        self._views[annotation.annotation_id] = view
        if view.selected:
            # rebuilt view of a selected pin: delegate re-applies callout accessibility
            self._delegate_call("did_select", view)
        logger.debug("materialized view for %r", annotation.title)
        return view

    def _recycle(self, annotation: PointAnnotation) -> None:
        view = self._views.pop(annotation.annotation_id, None)
        if view is None:
            return
        view.prepare_for_reuse()
        if view.reuse_identifier in self._registry:
            self._reuse_pool[view.reuse_identifier].append(view)
        logger.debug("recycled view for %r", annotation.title)

    def _refresh_views(self) -> None:
        for a in self._annotations:
            visible = self._is_visible(a)
            has_view = a.annotation_id in self._views
            if visible and not has_view:
                self._materialize(a)
            elif not visible and has_view:
                self._recycle(a)

    # --- region ---------------------------------------------------------

    @property
    def center(self) -> Coordinate:
        return self.projection.to_coordinate(*self._center)

    @property
    def span(self) -> XY:
        return self._span

    @property
    def is_animating(self) -> bool:
        return self._animation is not None

    def visible_rect(self) -> Tuple[float, float, float, float]:
        (cx, cy), (w, h) = self._center, self._span
        return (cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2)

    def _is_visible(self, annotation: PointAnnotation) -> bool:
        x, y = self.projection.to_xy(annotation.coordinate)
        xmin, ymin, xmax, ymax = self.visible_rect()
        return xmin <= x <= xmax and ymin <= y <= ymax

    def set_center(self, coordinate: Coordinate, animated: bool = False) -> None:
        self._move_to(self.projection.to_xy(coordinate), self._span, animated)

    def show_annotations(self, annotations: Iterable[PointAnnotation], animated: bool = False) -> None:
        """Fit the visible region around `annotations` (padded, never below MIN_SPAN_M)."""
        pts = [self.projection.to_xy(a.coordinate) for a in annotations]
        if not pts:
            return
        xs = [p[0] for p in pts]; ys = [p[1] for p in pts]
        w = max(max(xs) - min(xs), self.MIN_SPAN_M) * (1 + 2 * self.FRAME_PADDING)
        h = max(max(ys) - min(ys), self.MIN_SPAN_M) * (1 + 2 * self.FRAME_PADDING)
        center = ((min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2)
        self._move_to(center, (w, h), animated, refresh_basemap=True)

    def recenter_and_materialize(self, annotation: PointAnnotation) -> AnnotationView | None:
        """Re-centre on `annotation` without animation, then return its view (if any)."""
        self.set_center(annotation.coordinate, animated=False)
        return self.view_for(annotation)

    def _move_to(self, center: XY, span: XY, animated: bool, refresh_basemap: bool = False) -> None:
        self._cancel_animation()
        if not animated:
            self._center, self._span = center, span
            self._apply_region()
            if refresh_basemap:
                self._update_basemap()
            return
        anim = _RegionAnimation(self._center, self._span, center, span,
                                frames=self.ANIMATION_FRAMES, refresh_basemap=refresh_basemap)
        timer = self.figure.canvas.new_timer(interval=self.ANIMATION_INTERVAL_MS)
        timer.add_callback(self._step_animation)
        anim.timer = timer
        self._animation = anim
        timer.start()

    def _step_animation(self) -> None:
        anim = self._animation
        if anim is None:
            return
        anim.frame += 1
        if anim.frame >= anim.frames:
            self.finish_animation()
            return
        center, span = anim.at(anim.frame / anim.frames)
        # views stay as they are until the move completes
        self._set_limits(center, span)
        self.request_redraw()

    def finish_animation(self) -> None:
        """Jump to the end of a running camera animation and materialize views."""
        anim = self._animation
        if anim is None:
            return
        self._cancel_animation()
        self._center, self._span = anim.end_center, anim.end_span
        self._apply_region()
        if anim.refresh_basemap:
            self._update_basemap()

    def _cancel_animation(self) -> None:
        if self._animation is not None:
            if self._animation.timer is not None:
                self._animation.timer.stop()
            self._animation = None

    def _set_limits(self, center: XY, span: XY) -> None:
        (cx, cy), (w, h) = center, span
        self.ax.set_xlim(cx - w / 2, cx + w / 2)
        self.ax.set_ylim(cy - h / 2, cy + h / 2)

    def _apply_region(self) -> None:
        self._set_limits(self._center, self._span)
        self._refresh_views()
        self.request_redraw()

    def _update_basemap(self) -> None:
        if self.basemap is None:
            return
        zoom = self.basemap.draw(self.ax, self._center, self._span)
        # imshow re-applies the data limits
        self._set_limits(self._center, self._span)
        logger.info("basemap '%s' loaded at zoom %d", self.basemap.tiles, zoom)

    # --- selection ------------------------------------------------------

    @property
    def selected_annotations(self) -> List[PointAnnotation]:
        return list(self._selected)

    def select_annotation(self, annotation: PointAnnotation) -> None:
        if annotation in self._selected:
            return
        self.deselect_all()
        self._selected.append(annotation)
        view = self.view_for(annotation)
        if view is not None:
            view.set_selected(True)
            self._delegate_call("did_select", view)
        self.request_redraw()

    def deselect_annotation(self, annotation: PointAnnotation) -> None:
        if annotation not in self._selected:
            return
        self._selected.remove(annotation)
        view = self.view_for(annotation)
        if view is not None:
            view.set_selected(False)
            self._delegate_call("did_deselect", view)
        self.request_redraw()

    def deselect_all(self) -> None:
        for a in list(self._selected):
            self.deselect_annotation(a)

    def _on_button_press(self, event) -> None:
        if event.inaxes is not self.ax:
            return
        for view in list(self._views.values()):
            if view.hit_test(event):
                self.select_annotation(view.annotation)
                return
        self.deselect_all()

    def _delegate_call(self, name: str, *args):
        fn = getattr(self.delegate, name, None)
        return fn(self, *args) if fn is not None else None

    # --- drawing --------------------------------------------------------

    def show_status(self, text: str) -> None:
        """One line of text along the bottom edge (mirrors what the screen reader says)."""
        if self._status is None:
            self._status = self.ax.text(
                0.01, 0.01, "", transform=self.ax.transAxes, fontsize=10, zorder=10,
                bbox=dict(boxstyle="round,pad=0.25", fc="white", ec="gray", alpha=0.85),
            )
        self._status.set_text(text)
        self.request_redraw()

    def request_redraw(self) -> None:
        self.figure.canvas.draw_idle()
