# navigator.py
"""
Keyboard stand-in for the platform screen reader.

Keeps the focused element, turns key presses into rotor searches and moves the
focus ring onto whatever the active rotor returns. Announcements go to the log
and to the surface's status line unless another announcer is supplied.
"""
from __future__ import annotations
import logging
from typing import Callable

from poi_mapview.model.models import RotorItemResult, RotorSearchDirection, RotorSearchPredicate
from poi_mapview.visualizer2d.markers import AnnotationView, CalloutButton

Announcer = Callable[[str], None]


def accessibility_label(element) -> str:
    label = getattr(element, "accessibility_label", None)
    return label if label else repr(element)


class AccessibilityNavigator:
    NEXT_KEYS = ("down", "n")
    PREVIOUS_KEYS = ("up", "b")
    ACTIVATE_KEYS = ("enter", " ")
    ESCAPE_KEYS = ("escape",)

    def __init__(self, surface, logger: logging.Logger | None = None,
                 announcer: Announcer | None = None,
                 boundary_cue: Callable[[], None] | None = None):
        self.surface = surface
        self.logger = logger or logging.getLogger(__name__)
        self.announcer = announcer or self._announce
        self.boundary_cue = boundary_cue or self._boundary_cue
        self.focused_element = None
        self._cid_key = None

    # --- rotors ---------------------------------------------------------

    @property
    def rotor(self):
        rotors = self.surface.accessibility_custom_rotors
        if not rotors:
            return None
        return rotors[0]

    def rotor_next(self):
        return self._search(RotorSearchDirection.NEXT)

    def rotor_previous(self):
        return self._search(RotorSearchDirection.PREVIOUS)

    def _search(self, direction: RotorSearchDirection):
        rotor = self.rotor
        if rotor is None:
            self.logger.info("No custom rotor installed")
            self.boundary_cue()
            return None
        predicate = RotorSearchPredicate(direction, RotorItemResult(self.focused_element))
        try:
            result = rotor.search(predicate)
        except Exception:
            # handler faults end like an empty result
            self.logger.exception("Rotor '%s' failed", rotor.name)
            result = None
        if result is None or result.target_element is None:
            self.boundary_cue()
            return None
        self.focus(result.target_element)
        return result.target_element

    # --- focus ----------------------------------------------------------

    def focus(self, element) -> None:
        previous = self.focused_element
        if isinstance(previous, AnnotationView):
            previous.set_focused(False)
        self.focused_element = element
        if isinstance(element, AnnotationView):
            element.set_focused(True)
        if element is not None:
            self.announcer(accessibility_label(element))
        self.surface.request_redraw()

    def activate(self) -> None:
        """Double-tap equivalent: open/close the callout of the focused marker."""
        element = self.focused_element
        if isinstance(element, AnnotationView) and element.annotation is not None:
            self.surface.select_annotation(element.annotation)
            accessory = element.right_callout_accessory
            if accessory is not None and accessory.is_accessibility_element:
                self.focus(accessory)
        elif isinstance(element, CalloutButton) and element.owner is not None:
            view = element.owner
            if view.annotation is not None:
                self.surface.deselect_annotation(view.annotation)
            self.focus(view if view.is_accessibility_element else None)

    def escape(self) -> None:
        self.surface.deselect_all()
        self.focus(None)

    # --- output ---------------------------------------------------------

    def _announce(self, text: str) -> None:
        self.logger.info("Announce: %s", text)
        self.surface.show_status(text)

    def _boundary_cue(self) -> None:
        self.logger.info("Boundary reached")

    # --- key bindings ---------------------------------------------------

    def connect(self, figure=None) -> None:
        figure = figure or self.surface.figure
        self._cid_key = figure.canvas.mpl_connect("key_press_event", self.on_key_press)

    def on_key_press(self, event) -> None:
        key = event.key
        if key in self.NEXT_KEYS:
            self.rotor_next()
        elif key in self.PREVIOUS_KEYS:
            self.rotor_previous()
        elif key in self.ACTIVATE_KEYS:
            self.activate()
        elif key in self.ESCAPE_KEYS:
            self.escape()
