"""Status health classification.

``StatusHealth.classify`` is the single source of truth for both the color a
status is rendered in and the rank it sorts at. Nothing else in the code base
inspects status strings to decide either.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final

from kubefuzz.constants.defaults import DELETED_STATUS

_CRITICAL_EXACT: Final = frozenset(
    {"Failed", "Error", "OOMKilled", "NotReady", "Lost", "Evicted", "BackOff"}
)
_CRITICAL_PREFIXES: Final = (
    "CrashLoop",
    "ErrImage",
    "ImagePull",
    "Init:Error",
    "Init:ErrImage",
    "Init:ImagePull",
    "Failed(",
)
_WARNING_EXACT: Final = frozenset(
    {"Pending", "Terminating", "ContainerCreating", "Unknown"}
)
_WARNING_PREFIX: Final = "Init:"
_HEALTHY_EXACT: Final = frozenset(
    {
        "Running",
        "Active",
        "Bound",
        "Complete",
        "Succeeded",
        "Ready",
        "Scheduled",
        "ClusterIP",
        "NodePort",
        "LoadBalancer",
    }
)
_HEALTHY_PREFIX: Final = "Active("


class StatusHealth(Enum):
    """Health tier of a resource status string."""

    CRITICAL = "critical"
    WARNING = "warning"
    HEALTHY = "healthy"
    UNKNOWN = "unknown"

    @classmethod
    def classify(cls, status: Any) -> StatusHealth:
        """Classify a status string. Total: never raises.

        Rules are evaluated in order and the first match wins. Strings that
        match no rule are treated as healthy.
        """
        text = status if isinstance(status, str) else str(status)

        if text in _CRITICAL_EXACT or text.startswith(_CRITICAL_PREFIXES):
            return cls.CRITICAL
        if text in _WARNING_EXACT or text.startswith(_WARNING_PREFIX):
            return cls.WARNING
        if text == DELETED_STATUS:
            return cls.UNKNOWN
        if text in _HEALTHY_EXACT or text.startswith(_HEALTHY_PREFIX):
            return cls.HEALTHY
        if "/" in text:
            ready, _, desired = text.partition("/")
            return cls.HEALTHY if ready == desired else cls.WARNING
        return cls.HEALTHY

    def priority(self) -> int:
        """Sort priority: 0 sorts first (critical), 2 sorts last (healthy)."""
        return _PRIORITIES[self]

    def color(self) -> str:
        """Rich color name used to render statuses of this tier."""
        return _COLORS[self]


_PRIORITIES: Final = {
    StatusHealth.CRITICAL: 0,
    StatusHealth.WARNING: 1,
    StatusHealth.UNKNOWN: 1,
    StatusHealth.HEALTHY: 2,
}

_COLORS: Final = {
    StatusHealth.CRITICAL: "red",
    StatusHealth.WARNING: "yellow",
    StatusHealth.HEALTHY: "green",
    StatusHealth.UNKNOWN: "bright_black",
}


__all__ = ["StatusHealth"]
