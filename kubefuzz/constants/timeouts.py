"""Timeout constants for KubeFuzz.

All timeout, backoff and interval values for kubectl requests, watchers
and the UI refresh cycle.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"

# Process-level command timeouts (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45
KUBECTL_CONFIG_TIMEOUT: Final = 8
PREVIEW_COMMAND_TIMEOUT: Final = 15

# ============================================================================
# Watcher timeouts (float, in seconds)
# ============================================================================

# Bounded wait for the first watcher's first listing before a context is
# treated as unreachable.
FIRST_INIT_TIMEOUT: Final = 8.0

WATCH_BACKOFF_INITIAL: Final = 0.5
WATCH_BACKOFF_FACTOR: Final = 2.0
WATCH_BACKOFF_MAX: Final = 30.0

# Grace period for a kubectl watch process to exit after terminate().
WATCH_PROCESS_KILL_GRACE: Final = 2.0

# ============================================================================
# UI intervals (float, in seconds)
# ============================================================================

VIEW_REFRESH_INTERVAL: Final = 0.25
RUNTIME_SHUTDOWN_TIMEOUT: Final = 5.0

__all__ = [
    "CLUSTER_REQUEST_TIMEOUT",
    "FIRST_INIT_TIMEOUT",
    "KUBECTL_COMMAND_TIMEOUT",
    "KUBECTL_CONFIG_TIMEOUT",
    "PREVIEW_COMMAND_TIMEOUT",
    "RUNTIME_SHUTDOWN_TIMEOUT",
    "VIEW_REFRESH_INTERVAL",
    "WATCH_BACKOFF_FACTOR",
    "WATCH_BACKOFF_INITIAL",
    "WATCH_BACKOFF_MAX",
    "WATCH_PROCESS_KILL_GRACE",
]
