"""
Single-screen POI map (matplotlib) with a custom accessibility rotor.

- model: POI catalog + annotation/overlay/rotor data types
- visualizer2d: map surface, annotation views, overlay renderer, projection
- presenter: populates the surface and acts as its delegate
- accessibility: marker rotor and the keyboard navigator that drives it
"""
__all__ = ["model", "visualizer2d", "presenter", "accessibility", "cli", "i18n"]
