# rotor.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence

from poi_mapview.i18n import _
from poi_mapview.model.models import (
    PointAnnotation,
    RotorItemResult,
    RotorSearchDirection,
    RotorSearchPredicate,
)
from poi_mapview.visualizer2d.markers import AnnotationView

RotorHandler = Callable[[RotorSearchPredicate], Optional[RotorItemResult]]


class AnnotationSource(Protocol):
    @property
    def annotations(self) -> Sequence[PointAnnotation]: ...
    def recenter_and_materialize(self, annotation: PointAnnotation) -> Optional[AnnotationView]: ...


@dataclass
class CustomRotor:
    name: str
    handler: RotorHandler

    def search(self, predicate: RotorSearchPredicate) -> Optional[RotorItemResult]:
        return self.handler(predicate)


class MarkerRotorController:
    """
    Walks the surface's annotations in list order, one materialized view per step.
    Each call re-reads the surface; nothing is kept between calls.
    """

    def __init__(self, surface: AnnotationSource, logger: logging.Logger | None = None):
        self.surface = surface
        self.logger = logger or logging.getLogger(__name__)

    def handle(self, predicate: RotorSearchPredicate) -> Optional[RotorItemResult]:
        forward = predicate.search_direction is RotorSearchDirection.NEXT

        # which element is focused right now
        target = predicate.current_item.target_element if predicate.current_item else None
        if target is None:
            self.logger.info("Current item target element is None")
            current_view = None
        elif isinstance(target, AnnotationView):
            current_view = target
        else:
            self.logger.error("Target element is not an annotation view: %r", target)
            current_view = None
        current = current_view.annotation if current_view is not None else None

        annotations = list(self.surface.annotations)
        step = 1 if forward else -1

        # start just outside the list so the first step lands on 0 or len - 1
        index = -1 if forward else len(annotations)
        if current is not None:
            positions: Dict[str, int] = {}
            for i, a in enumerate(annotations):
                positions.setdefault(a.annotation_id, i)
            index = positions.get(current.annotation_id, index)

        index += step
        while 0 <= index < len(annotations):
            requested = annotations[index]
            # must not animate: the view has to exist before this call returns
            view = self.surface.recenter_and_materialize(requested)
            if view is not None:
                self.logger.info("Returning %s at index %d", requested.title or "Unknown", index)
                return RotorItemResult(target_element=view, target_range=None)
            index += step

        self.logger.info("No annotation view found (%s)", predicate.search_direction.value)
        return None

    def make_rotor(self, name: str | None = None) -> CustomRotor:
        return CustomRotor(name=name or _("Markers"), handler=self.handle)


def install_marker_rotor(surface, logger: logging.Logger | None = None) -> CustomRotor:
    """Register the marker rotor as the surface's only custom rotor."""
    rotor = MarkerRotorController(surface, logger=logger).make_rotor()
    surface.accessibility_custom_rotors = [rotor]
    return rotor
