# projection.py
import math
from dataclasses import dataclass
from typing import Tuple

from poi_mapview.model.models import Coordinate


@dataclass(frozen=True)
class WebMercatorProjection:
    """EPSG:4326 <-> EPSG:3857"""
    def __post_init__(self):
        from pyproj import Transformer
        object.__setattr__(self, "_to_merc",
            Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True))
        object.__setattr__(self, "_to_geo",
            Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True))

    def lonlat_to_xy(self, lon, lat):
        return self._to_merc.transform(lon, lat)

    def xy_to_lonlat(self, x, y):
        return self._to_geo.transform(x, y)

    # --- Coordinate helpers ---

    def to_xy(self, c: Coordinate) -> Tuple[float, float]:
        return self.lonlat_to_xy(c.longitude, c.latitude)

    def to_coordinate(self, x: float, y: float) -> Coordinate:
        lon, lat = self.xy_to_lonlat(x, y)
        return Coordinate(latitude=lat, longitude=lon)

    def ground_to_map(self, meters: float, lat: float) -> float:
        """Ground distance at `lat` -> Mercator units (scale grows with 1/cos(lat))."""
        return meters / max(1e-9, math.cos(math.radians(lat)))
