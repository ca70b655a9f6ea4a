import logging
from unittest.mock import MagicMock

import pytest

from poi_mapview.accessibility.rotor import CustomRotor, MarkerRotorController, install_marker_rotor
from poi_mapview.model.models import (
    Coordinate,
    PointAnnotation,
    RotorItemResult,
    RotorSearchDirection,
    RotorSearchPredicate,
)
from poi_mapview.visualizer2d.markers import CalloutButton, MarkerAnnotationView

NEXT = RotorSearchDirection.NEXT
PREVIOUS = RotorSearchDirection.PREVIOUS


def predicate(direction, element=None):
    return RotorSearchPredicate(direction, RotorItemResult(element))


class StubSurface:
    """Annotation list + views; annotations in `hidden` never get a view."""

    def __init__(self, annotations, hidden=()):
        self._annotations = list(annotations)
        self.hidden = {a.annotation_id for a in hidden}
        self.views = {a.annotation_id: MarkerAnnotationView(a) for a in self._annotations}
        self.recentered = []

    @property
    def annotations(self):
        return list(self._annotations)

    def recenter_and_materialize(self, annotation):
        self.recentered.append(annotation)
        if annotation.annotation_id in self.hidden:
            return None
        return self.views[annotation.annotation_id]


@pytest.fixture
def abcd():
    return [
        PointAnnotation("A", Coordinate(50.947128, 6.931883)),
        PointAnnotation("B", Coordinate(50.94129, 6.95817)),
        PointAnnotation("C", Coordinate(50.932203, 6.964272)),
        PointAnnotation("D", Coordinate(50.958333, 6.973333)),
    ]


# --- Cologne scenarios on the real surface ---------------------------------

def _handle(cologne, direction, element=None):
    rotor = MarkerRotorController(cologne.surface)
    return rotor.handle(predicate(direction, element))


def test_next_from_cathedral_is_chocolate_museum(cologne):
    b = cologne.surface.view_for(cologne.by_title["Cologne Cathedral"])
    result = _handle(cologne, NEXT, b)
    assert result.target_element.annotation is cologne.by_title["Chocolate Museum"]
    assert result.target_range is None


def test_previous_from_cathedral_is_colonius(cologne):
    b = cologne.surface.view_for(cologne.by_title["Cologne Cathedral"])
    result = _handle(cologne, PREVIOUS, b)
    assert result.target_element.annotation is cologne.by_title["Colonius"]


def test_first_invocation_starts_at_either_end(cologne):
    assert _handle(cologne, NEXT).target_element.annotation is cologne.by_title["Colonius"]
    assert _handle(cologne, PREVIOUS).target_element.annotation is cologne.by_title["Cologne Zoo"]


def test_next_from_last_is_exhausted(cologne):
    d = cologne.surface.view_for(cologne.by_title["Cologne Zoo"])
    assert _handle(cologne, NEXT, d) is None


def test_returned_view_is_centred_and_materialized(cologne):
    result = _handle(cologne, NEXT)
    target = cologne.by_title["Colonius"]
    surface = cologne.surface
    assert surface.view_for(target) is result.target_element
    assert surface.center.latitude == pytest.approx(target.coordinate.latitude)
    assert surface.center.longitude == pytest.approx(target.coordinate.longitude)
    assert not surface.is_animating


def test_forward_then_backward_returns_to_start(cologne):
    cathedral = cologne.by_title["Cologne Cathedral"]
    forward = _handle(cologne, NEXT, cologne.surface.view_for(cathedral)).target_element
    back = _handle(cologne, PREVIOUS, forward).target_element
    assert back.annotation is cathedral


def test_walks_all_pois_in_order(cologne):
    seen = []
    element = None
    while True:
        result = _handle(cologne, NEXT, element)
        if result is None:
            break
        element = result.target_element
        seen.append(element.annotation.title)
    assert seen == ["Colonius", "Cologne Cathedral", "Chocolate Museum", "Cologne Zoo"]


def test_runs_while_camera_is_still_moving(surface):
    from poi_mapview.presenter import AnnotationPresenter
    annotations, _ = AnnotationPresenter(surface).populate()
    assert surface.is_animating
    assert surface.view_for(annotations[0]) is None

    result = MarkerRotorController(surface).handle(predicate(NEXT))
    assert result.target_element.annotation is annotations[0]
    assert not surface.is_animating


# --- traversal rules on a stub surface -------------------------------------

def test_skips_annotations_without_view(abcd):
    a, b, c, d = abcd
    surface = StubSurface(abcd, hidden=[b, c])
    result = MarkerRotorController(surface).handle(predicate(NEXT, surface.views[a.annotation_id]))
    assert result.target_element.annotation is d
    assert surface.recentered == [b, c, d]


def test_skipping_past_the_end_gives_no_result(abcd):
    a, b, c, d = abcd
    surface = StubSurface(abcd, hidden=[c, d])
    assert MarkerRotorController(surface).handle(predicate(NEXT, surface.views[b.annotation_id])) is None
    assert surface.recentered == [c, d]


def test_skips_backward_too(abcd):
    a, b, c, d = abcd
    surface = StubSurface(abcd, hidden=[c])
    result = MarkerRotorController(surface).handle(predicate(PREVIOUS, surface.views[d.annotation_id]))
    assert result.target_element.annotation is b


def test_empty_list_gives_no_result():
    surface = StubSurface([])
    assert MarkerRotorController(surface).handle(predicate(NEXT)) is None
    assert MarkerRotorController(surface).handle(predicate(PREVIOUS)) is None


def test_very_close_coordinates_do_not_match():
    p1 = PointAnnotation("P1", Coordinate(50.0, 7.0))
    p2 = PointAnnotation("P2", Coordinate(50.0, 7.0 + 1e-9))
    p3 = PointAnnotation("P3", Coordinate(50.1, 7.1))
    surface = StubSurface([p1, p2, p3])
    result = MarkerRotorController(surface).handle(predicate(NEXT, surface.views[p2.annotation_id]))
    assert result.target_element.annotation is p3


def test_identical_coordinates_are_told_apart_by_id():
    p1 = PointAnnotation("P1", Coordinate(50.0, 7.0))
    p2 = PointAnnotation("P2", Coordinate(50.0, 7.0))
    p3 = PointAnnotation("P3", Coordinate(50.1, 7.1))
    surface = StubSurface([p1, p2, p3])
    result = MarkerRotorController(surface).handle(predicate(NEXT, surface.views[p2.annotation_id]))
    assert result.target_element.annotation is p3


def test_view_of_unknown_annotation_starts_from_boundary(abcd):
    surface = StubSurface(abcd)
    stray = MarkerAnnotationView(PointAnnotation("X", Coordinate(1.0, 1.0)))
    result = MarkerRotorController(surface).handle(predicate(PREVIOUS, stray))
    assert result.target_element.annotation is abcd[-1]


# --- logging ---------------------------------------------------------------

def test_missing_focus_is_logged_as_info(abcd):
    log = MagicMock(spec=logging.Logger)
    MarkerRotorController(StubSurface(abcd), logger=log).handle(predicate(NEXT))
    assert log.info.called
    log.error.assert_not_called()


def test_non_annotation_focus_is_logged_as_error_and_ignored(abcd):
    log = MagicMock(spec=logging.Logger)
    surface = StubSurface(abcd)
    result = MarkerRotorController(surface, logger=log).handle(predicate(NEXT, CalloutButton()))
    log.error.assert_called_once()
    assert result.target_element.annotation is abcd[0]


def test_exhaustion_is_logged(abcd, caplog):
    log = logging.getLogger("test.rotor")
    surface = StubSurface(abcd, hidden=abcd)
    with caplog.at_level(logging.INFO, logger="test.rotor"):
        assert MarkerRotorController(surface, logger=log).handle(predicate(NEXT)) is None
    assert "No annotation view found" in caplog.text


# --- registration ----------------------------------------------------------

def test_install_marker_rotor_replaces_surface_rotors(abcd):
    surface = StubSurface(abcd)
    surface.accessibility_custom_rotors = [CustomRotor("old", lambda p: None)]
    rotor = install_marker_rotor(surface)
    assert surface.accessibility_custom_rotors == [rotor]
    assert rotor.name == "Markers"
    assert rotor.search(predicate(NEXT)).target_element.annotation is abcd[0]
