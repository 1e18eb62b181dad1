"""Default values for settings.

All default values used in NavigatorSettings and the persistence helpers.
"""

from typing import Final

# ============================================================================
# Application identity
# ============================================================================

APP_NAME: Final = "kubefuzz"
APP_TITLE: Final = "KubeFuzz"
KUBECTL_BINARY: Final = "kubectl"

# ============================================================================
# Persistence defaults
# ============================================================================

CONFIG_DIR_NAME: Final = "kubefuzz"
LAST_CONTEXT_FILE_NAME: Final = "last_context"
LOG_FILE_NAME: Final = "kubefuzz.log"
RUNTIME_DIR_PREFIX: Final = "kubefuzz-"
PREVIEW_MODE_FILE_NAME: Final = "preview-mode"

# ============================================================================
# Status defaults
# ============================================================================

DELETED_STATUS: Final = "[DELETED]"
UNKNOWN_STATUS: Final = "Unknown"
UNKNOWN_AGE: Final = "?"
CURRENT_CONTEXT_FALLBACK: Final = "unknown"
ALL_CONTEXTS_LABEL: Final = "all-contexts"

EXEC_SHELLS: Final = ("/bin/sh", "/bin/bash")

__all__ = [
    "ALL_CONTEXTS_LABEL",
    "APP_NAME",
    "APP_TITLE",
    "CONFIG_DIR_NAME",
    "CURRENT_CONTEXT_FALLBACK",
    "DELETED_STATUS",
    "EXEC_SHELLS",
    "KUBECTL_BINARY",
    "LAST_CONTEXT_FILE_NAME",
    "LOG_FILE_NAME",
    "PREVIEW_MODE_FILE_NAME",
    "RUNTIME_DIR_PREFIX",
    "UNKNOWN_AGE",
    "UNKNOWN_STATUS",
]
