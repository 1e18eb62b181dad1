"""Screens for the KubeFuzz TUI."""

from kubefuzz.screens.context_picker import ContextPickerModal
from kubefuzz.screens.navigator import NavigatorScreen

__all__ = ["ContextPickerModal", "NavigatorScreen"]
