"""Utility modules for KubeFuzz."""

from kubefuzz.utils.logging_setup import configure_logging, default_log_path
from kubefuzz.utils.runtime_dir import PreviewState, RuntimeDir, RuntimeDirError

__all__ = [
    "PreviewState",
    "RuntimeDir",
    "RuntimeDirError",
    "configure_logging",
    "default_log_path",
]
