# renderer.py
from dataclasses import dataclass
from matplotlib import patches

from poi_mapview.model.models import CircleOverlay
from .projection import WebMercatorProjection


@dataclass
class CircleRenderer:
    """Stroke/fill style for a CircleOverlay; builds the patch the surface draws."""
    fill_color: str = "none"
    stroke_color: str = "blue"
    line_width: float = 2.0
    is_accessibility_element: bool = False
    zorder: int = 3

    def make_patch(self, overlay: CircleOverlay, projection: WebMercatorProjection) -> patches.Circle:
        x, y = projection.to_xy(overlay.center)
        r = projection.ground_to_map(overlay.radius, overlay.center.latitude)
        return patches.Circle(
            (x, y), r,
            facecolor=self.fill_color,
            edgecolor=self.stroke_color,
            linewidth=self.line_width,
            zorder=self.zorder,
        )
