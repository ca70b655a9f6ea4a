# config.py
from dataclasses import dataclass, fields
from pathlib import Path
import json

from poi_mapview.model.catalog import MARKER_RADIUS_M


@dataclass
class ViewerConfig:
    overlay_map: bool = False
    tiles: str = "OpenStreetMap.Mapnik"
    zoom: int | None = None
    marker_radius_m: float = MARKER_RADIUS_M
    user_location: list[float] | None = None   # [lat, lon]
    language: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict) -> "ViewerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        cfg = cls(**d)
        if cfg.user_location is not None and len(cfg.user_location) != 2:
            raise ValueError("user_location must be [lat, lon]")
        return cfg


def load_json(path: str | None) -> dict:
    if not path: return {}
    p = Path(path)
    if not p.exists(): raise FileNotFoundError(path)
    with p.open("r", encoding="utf-8") as f: data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("config json must be an object")
    return data
