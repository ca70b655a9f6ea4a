# basemap.py
"""Street tiles drawn under the map surface, sized from the framed region."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
import contextily as ctx

XY = Tuple[float, float]

TILE_PX = 256
EARTH_CIRCUMFERENCE_M = 40075016.68557849  # EPSG:3857 width at z=0


@dataclass
class Basemap:
    """
    Fetches one image covering the framed region plus `margin` spans on every
    side, so short pans stay on tiles. The image replaces the previous one.
    """
    tiles: str = "OpenStreetMap.Mapnik"
    zoom: int | None = None
    margin: float = 1.0
    target_px: int = 1024   # screen width the framed region is drawn at
    max_px: int = 4096      # widest image we will download
    image: object = field(default=None, init=False, repr=False)

    @property
    def provider(self):
        if self.tiles.startswith(("http://", "https://")):
            return self.tiles
        prov = ctx.providers
        for key in filter(None, self.tiles.split(".")):
            prov = getattr(prov, key)
        return prov

    def bounds(self, center: XY, span: XY) -> Tuple[float, float, float, float]:
        (cx, cy), (w, h) = center, span
        half_w, half_h = w * (0.5 + self.margin), h * (0.5 + self.margin)
        return (cx - half_w, cy - half_h, cx + half_w, cy + half_h)

    def zoom_for(self, span: XY, fetch_width: float) -> int:
        """Tile level for `span` at `target_px`, lowered until `fetch_width` fits in `max_px`."""
        if self.zoom is not None:
            return self.zoom
        m_per_px = max(1e-9, max(span) / max(1, self.target_px))
        z = int(round(np.log2(EARTH_CIRCUMFERENCE_M / TILE_PX / m_per_px)))
        provider = self.provider
        z = int(np.clip(z, getattr(provider, "min_zoom", 0), getattr(provider, "max_zoom", 22)))
        while z > 0 and fetch_width / (EARTH_CIRCUMFERENCE_M / TILE_PX / 2 ** z) > self.max_px:
            z -= 1
        return z

    def draw(self, ax, center: XY, span: XY) -> int:
        """Fetch tiles for the region and put them at the bottom of `ax`. Returns the zoom used."""
        xmin, ymin, xmax, ymax = self.bounds(center, span)
        z = self.zoom_for(span, xmax - xmin)
        img, extent = ctx.bounds2img(xmin, ymin, xmax, ymax, source=self.provider, zoom=z, ll=False)
        self.remove()
        self.image = ax.imshow(img, extent=extent, zorder=0, interpolation="bilinear")
        return z

    def remove(self) -> None:
        if self.image is not None:
            self.image.remove()
            self.image = None
