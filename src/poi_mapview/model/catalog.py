# catalog.py
from typing import Tuple

from poi_mapview.i18n import _
from .models import POIInfo

MARKER_RADIUS_M = 10.0


def cologne_pois() -> Tuple[POIInfo, ...]:
    """Fixed POI list. Names are looked up in the active language on each call."""
    return (
        POIInfo(name=_("Colonius"), latitude=50.947128, longitude=6.931883),
        POIInfo(name=_("Cologne Cathedral"), latitude=50.94129, longitude=6.95817),
        POIInfo(name=_("Chocolate Museum"), latitude=50.932203, longitude=6.964272),
        POIInfo(name=_("Cologne Zoo"), latitude=50.958333, longitude=6.973333),
    )


COLOGNE_POIS: Tuple[POIInfo, ...] = cologne_pois()
