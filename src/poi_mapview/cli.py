# cli.py
import argparse
import logging
from dataclasses import dataclass

import matplotlib.pyplot as plt

from poi_mapview import i18n
from poi_mapview.accessibility.navigator import AccessibilityNavigator
from poi_mapview.accessibility.rotor import CustomRotor, install_marker_rotor
from poi_mapview.model.catalog import cologne_pois
from poi_mapview.model.models import Coordinate
from poi_mapview.presenter import AnnotationPresenter
from poi_mapview.visualizer2d.config import ViewerConfig, load_json
from poi_mapview.visualizer2d.map_surface import MapSurface
from poi_mapview.visualizer2d.basemap import Basemap

logger = logging.getLogger(__name__)


@dataclass
class Viewer:
    figure: object
    surface: MapSurface
    presenter: AnnotationPresenter
    rotor: CustomRotor
    navigator: AccessibilityNavigator


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Cologne POI map with a marker rotor")
    p.add_argument("--config", help="JSON file with viewer options")
    p.add_argument("--overlay-map", action="store_true", default=None, help="draw basemap tiles")
    p.add_argument("--tiles", help="contextily provider key, e.g. OpenStreetMap.Mapnik")
    p.add_argument("--zoom", type=int, help="tile zoom (auto when omitted)")
    p.add_argument("--user-lat", type=float, help="live location latitude")
    p.add_argument("--user-lon", type=float, help="live location longitude")
    p.add_argument("--language", help="UI language code")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return p.parse_args(argv)


def resolve_config(args) -> ViewerConfig:
    cfg_dict = load_json(args.config)
    # JSON first, CLI on top
    for k, v in vars(args).items():
        if k in ("config", "user_lat", "user_lon"): continue
        if v is not None: cfg_dict[k] = v
    if (args.user_lat is None) != (args.user_lon is None):
        raise ValueError("--user-lat and --user-lon must be given together")
    if args.user_lat is not None:
        cfg_dict["user_location"] = [args.user_lat, args.user_lon]
    return ViewerConfig.from_dict(cfg_dict)


def build_viewer(cfg: ViewerConfig, fig=None) -> Viewer:
    if fig is None:
        fig = plt.figure(figsize=(9, 8), dpi=100)
    ax = fig.add_subplot(1, 1, 1)
    ax.set_title(i18n._("Cologne"))

    basemap = Basemap(cfg.tiles, cfg.zoom) if cfg.overlay_map else None
    surface = MapSurface(ax, basemap=basemap)
    if cfg.user_location is not None:
        lat, lon = cfg.user_location
        surface.set_user_location(Coordinate(float(lat), float(lon)))

    presenter = AnnotationPresenter(surface, pois=cologne_pois(), marker_radius=cfg.marker_radius_m)
    presenter.populate()

    rotor = install_marker_rotor(surface)
    navigator = AccessibilityNavigator(surface)
    navigator.connect(fig)
    return Viewer(figure=fig, surface=surface, presenter=presenter, rotor=rotor, navigator=navigator)


def main(argv=None):
    args = parse_args(argv)
    cfg = resolve_config(args)

    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    i18n.set_language(cfg.language)

    viewer = build_viewer(cfg)
    logger.info("Rotor '%s' ready: down/n = next, up/b = previous, enter = open callout, escape = clear",
                viewer.rotor.name)
    plt.show()


if __name__ == "__main__":
    main()
