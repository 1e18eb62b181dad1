"""Limit and threshold constants for KubeFuzz.

All limit values, thresholds, and validation ranges.
"""

from typing import Final

# ============================================================================
# Display limits
# ============================================================================

NAME_DISPLAY_MAX_CHARS: Final = 31
STATUS_COLUMN_WIDTH: Final = 17
PREVIEW_MAX_CHARS: Final = 200_000

# ============================================================================
# Action limits
# ============================================================================

# Deleting more than this many items requires typing "yes" in full.
BULK_DELETE_THRESHOLD: Final = 10
LOG_TAIL_LINES: Final = 200
PREVIEW_LOG_TAIL_LINES: Final = 100

# ============================================================================
# Validation limits
# ============================================================================

PORT_MIN: Final = 1
PORT_MAX: Final = 65535
PRIVILEGED_PORT_MAX: Final = 1023
REFRESH_INTERVAL_MIN: Final = 0.05

__all__ = [
    "BULK_DELETE_THRESHOLD",
    "LOG_TAIL_LINES",
    "NAME_DISPLAY_MAX_CHARS",
    "PORT_MAX",
    "PORT_MIN",
    "PREVIEW_LOG_TAIL_LINES",
    "PREVIEW_MAX_CHARS",
    "PRIVILEGED_PORT_MAX",
    "REFRESH_INTERVAL_MIN",
    "STATUS_COLUMN_WIDTH",
]
