"""Keyboard bindings module.

This module provides all keyboard bindings for the KubeFuzz TUI.
Bindings are organized into two categories:

- app: App-level bindings (APP_BINDINGS)
- navigation: Screen-specific bindings (*_BINDINGS)
"""

from kubefuzz.keyboard.app import APP_BINDINGS
from kubefuzz.keyboard.navigation import (
    CONTEXT_PICKER_BINDINGS,
    NAVIGATOR_SCREEN_BINDINGS,
    TRIGGER_BINDINGS,
)

__all__ = [
    "APP_BINDINGS",
    "CONTEXT_PICKER_BINDINGS",
    "NAVIGATOR_SCREEN_BINDINGS",
    "TRIGGER_BINDINGS",
]
