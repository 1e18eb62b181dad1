"""Navigator screen - live item list, filter, preview and trigger keys."""

from kubefuzz.screens.navigator.navigator_screen import NavigatorScreen

__all__ = ["NavigatorScreen"]
