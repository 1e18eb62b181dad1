"""State models: settings and persisted context."""

from kubefuzz.models.state.app_settings import (
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
    NavigatorSettings,
)
from kubefuzz.models.state.config_manager import (
    ConfigManager,
    load_last_context,
    save_last_context,
)

__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
    "NavigatorSettings",
    "load_last_context",
    "save_last_context",
]
