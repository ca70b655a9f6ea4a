"""
Accessibility layer: custom rotor + the focus navigator that drives it.

- rotor: CustomRotor, MarkerRotorController (next/previous POI view)
- navigator: AccessibilityNavigator (focus, key bindings, announcements)
"""
__all__ = ["rotor", "navigator"]
