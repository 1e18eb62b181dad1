"""Constants module for KubeFuzz.

Centralized constants organized by domain:
- enums.py: All Enum class definitions (resource kinds, triggers, phases)
- timeouts.py: Timeout, backoff and interval values (seconds)
- limits.py: Limit values (max/min)
- defaults.py: Default values for settings and persistence paths

Note: Keyboard bindings are defined in kubefuzz.keyboard module.
"""

from kubefuzz.constants.defaults import (
    APP_NAME,
    APP_TITLE,
    DELETED_STATUS,
    UNKNOWN_AGE,
    UNKNOWN_STATUS,
)
from kubefuzz.constants.enums import (
    ALL_KINDS,
    ContextSource,
    PreviewMode,
    ResourceKind,
    TriggerKey,
    WatchEventType,
    WatchPhase,
)
from kubefuzz.constants.limits import (
    BULK_DELETE_THRESHOLD,
    PORT_MAX,
    PORT_MIN,
)
from kubefuzz.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    FIRST_INIT_TIMEOUT,
    VIEW_REFRESH_INTERVAL,
)

__all__ = [
    "ALL_KINDS",
    "APP_NAME",
    "APP_TITLE",
    "BULK_DELETE_THRESHOLD",
    "CLUSTER_REQUEST_TIMEOUT",
    "DELETED_STATUS",
    "FIRST_INIT_TIMEOUT",
    "PORT_MAX",
    "PORT_MIN",
    "UNKNOWN_AGE",
    "UNKNOWN_STATUS",
    "VIEW_REFRESH_INTERVAL",
    "ContextSource",
    "PreviewMode",
    "ResourceKind",
    "TriggerKey",
    "WatchEventType",
    "WatchPhase",
]
