"""Logging configuration.

The terminal belongs to the UI, so records go to a log file instead of a
stream handler.
"""

from __future__ import annotations

import logging
import logging.config as log_config
import os
from pathlib import Path
from typing import Any

from kubefuzz.constants.defaults import APP_NAME, LOG_FILE_NAME

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_log_path() -> Path:
    """``$XDG_STATE_HOME/kubefuzz/kubefuzz.log`` (default ``~/.local/state``)."""
    state_home = os.environ.get("XDG_STATE_HOME")
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    return base / APP_NAME / LOG_FILE_NAME


def get_logging_config(log_path: Path, debug: bool = False) -> dict[str, Any]:
    """Get logging configuration for the ``kubefuzz`` logger tree."""
    level = "DEBUG" if debug else "INFO"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "default",
                "filename": str(log_path),
                "maxBytes": 1_000_000,
                "backupCount": 2,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            APP_NAME: {
                "handlers": ["file"],
                "level": level,
                "propagate": False,
            },
        },
    }


def configure_logging(log_file: str | None = None, debug: bool = False) -> Path | None:
    """Route ``kubefuzz`` logging to a file; returns the path, or None if unusable."""
    log_path = Path(log_file).expanduser() if log_file else default_log_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        log_config.dictConfig(get_logging_config(log_path, debug))
    except (OSError, ValueError):
        # No writable log location: stay silent rather than draw over the UI.
        logging.getLogger(APP_NAME).addHandler(logging.NullHandler())
        return None
    logger.debug("Logging to %s (debug=%s)", log_path, debug)
    return log_path


__all__ = ["configure_logging", "default_log_path", "get_logging_config"]
