from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# --- geometry ----------------------------------------------------------

@dataclass(frozen=True)
class Coordinate:
    """WGS84 degrees. Equality is exact on both components."""
    latitude: float
    longitude: float


# --- catalog -----------------------------------------------------------

@dataclass(frozen=True)
class POIInfo:
    name: str
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


# --- map content -------------------------------------------------------

def _new_annotation_id() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class PointAnnotation:
    """A pin on the map. Identity is the opaque annotation_id, not the coordinate."""
    title: Optional[str]
    coordinate: Coordinate
    annotation_id: str = field(default_factory=_new_annotation_id)


@dataclass(eq=False)
class UserLocation(PointAnnotation):
    """The live-location marker the surface inserts when location display is on."""
    title: Optional[str] = "My Location"
    coordinate: Coordinate = Coordinate(0.0, 0.0)


@dataclass(eq=False)
class CircleOverlay:
    center: Coordinate
    radius: float  # metres
    is_accessibility_element: bool = False


# --- rotor protocol ----------------------------------------------------

class RotorSearchDirection(Enum):
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass
class RotorItemResult:
    target_element: Any
    target_range: Any = None


@dataclass
class RotorSearchPredicate:
    search_direction: RotorSearchDirection
    current_item: RotorItemResult = field(default_factory=lambda: RotorItemResult(None))


__all__ = [
    "Coordinate",
    "POIInfo",
    "PointAnnotation",
    "UserLocation",
    "CircleOverlay",
    "RotorSearchDirection",
    "RotorItemResult",
    "RotorSearchPredicate",
]
