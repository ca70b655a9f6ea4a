# presenter.py
from __future__ import annotations
import logging
from typing import Iterable, List, Tuple

from poi_mapview.model.catalog import COLOGNE_POIS, MARKER_RADIUS_M
from poi_mapview.model.models import CircleOverlay, POIInfo, PointAnnotation, UserLocation
from poi_mapview.visualizer2d.markers import AnnotationView, CalloutButton, MarkerAnnotationView
from poi_mapview.visualizer2d.renderer import CircleRenderer

logger = logging.getLogger(__name__)

DEFAULT_REUSE_IDENTIFIER = "defaultAnnotationView"


class AnnotationPresenter:
    """
    Puts the POI catalog on a MapSurface and acts as its delegate:
    one pin + one marker circle per POI, pins with an info callout.
    """

    def __init__(self, surface, pois: Iterable[POIInfo] = COLOGNE_POIS,
                 marker_radius: float = MARKER_RADIUS_M):
        self.surface = surface
        self.pois: Tuple[POIInfo, ...] = tuple(pois)
        self.marker_radius = marker_radius
        surface.delegate = self

    def register_annotation_views(self) -> None:
        self.surface.register(MarkerAnnotationView, DEFAULT_REUSE_IDENTIFIER)

    def populate(self) -> Tuple[List[PointAnnotation], List[CircleOverlay]]:
        self.register_annotation_views()

        annotations: List[PointAnnotation] = []
        overlays: List[CircleOverlay] = []
        for info in self.pois:
            coordinate = info.coordinate
            annotation = PointAnnotation(title=info.name, coordinate=coordinate)
            overlay = CircleOverlay(center=coordinate, radius=self.marker_radius,
                                    is_accessibility_element=False)
            self.surface.add_overlay(overlay)
            self.surface.add_annotation(annotation)
            annotations.append(annotation)
            overlays.append(overlay)

        self.surface.show_annotations(self.surface.annotations, animated=True)
        logger.info("Placed %d POIs", len(annotations))
        return annotations, overlays

    # --- surface delegate ---

    def view_for_annotation(self, surface, annotation: PointAnnotation) -> AnnotationView | None:
        if isinstance(annotation, UserLocation):
            # the surface's default location view is fine
            return None
        view = surface.dequeue_reusable_annotation_view(DEFAULT_REUSE_IDENTIFIER, annotation)
        view.can_show_callout = True
        view.accessibility_traits = {"button"}
        view.right_callout_accessory = CalloutButton(kind="info")
        return view

    def renderer_for_overlay(self, surface, overlay: CircleOverlay) -> CircleRenderer:
        return CircleRenderer(fill_color="none", stroke_color="blue", line_width=2,
                              is_accessibility_element=False)

    def did_select(self, surface, view: AnnotationView) -> None:
        # the callout button takes over as the accessible element
        accessory = view.right_callout_accessory
        if accessory is not None:
            accessory.is_accessibility_element = True
        view.is_accessibility_element = False

    def did_deselect(self, surface, view: AnnotationView) -> None:
        accessory = view.right_callout_accessory
        if accessory is not None:
            accessory.is_accessibility_element = False
        view.is_accessibility_element = True
