import matplotlib
matplotlib.use("Agg")

from types import SimpleNamespace

import matplotlib.pyplot as plt
import pytest

from poi_mapview.presenter import AnnotationPresenter
from poi_mapview.visualizer2d.map_surface import MapSurface


@pytest.fixture
def ax():
    fig, ax = plt.subplots(figsize=(6, 6), dpi=100)
    yield ax
    plt.close(fig)


@pytest.fixture
def surface(ax):
    return MapSurface(ax)


@pytest.fixture
def cologne(surface):
    """Surface populated with the four Cologne POIs, camera move finished."""
    presenter = AnnotationPresenter(surface)
    annotations, overlays = presenter.populate()
    surface.finish_animation()
    by_title = {a.title: a for a in annotations}
    return SimpleNamespace(surface=surface, presenter=presenter,
                           annotations=annotations, overlays=overlays, by_title=by_title)
