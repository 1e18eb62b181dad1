"""Persistence of the last-used kubeconfig context.

The file holds a single context name. It is written with owner-only
permissions and is strictly best-effort: a missing, unreadable or corrupt
file means "no saved context", and write failures are logged, never raised
to callers of ``load_last_context`` / ``save_last_context``.
"""

from __future__ import annotations

import logging
import os
from contextlib import suppress
from pathlib import Path

from kubefuzz.constants.defaults import CONFIG_DIR_NAME, LAST_CONTEXT_FILE_NAME
from kubefuzz.models.state.app_settings import ConfigLoadError, ConfigSaveError

logger = logging.getLogger(__name__)

_DIR_MODE = 0o700
_FILE_MODE = 0o600
# Context names are short; anything larger is not a file we wrote.
_MAX_CONTEXT_BYTES = 4096


class ConfigManager:
    """Reads and writes the persisted last-context file."""

    ENV_CONFIG_HOME = "XDG_CONFIG_HOME"

    @classmethod
    def config_dir(cls) -> Path:
        """Return ``$XDG_CONFIG_HOME/kubefuzz`` (default ``~/.config/kubefuzz``)."""
        base = os.environ.get(cls.ENV_CONFIG_HOME, "").strip()
        root = Path(base) if base else Path.home() / ".config"
        return root / CONFIG_DIR_NAME

    @classmethod
    def last_context_path(cls) -> Path:
        return cls.config_dir() / LAST_CONTEXT_FILE_NAME

    @classmethod
    def load(cls) -> str | None:
        """Read the saved context name.

        Returns:
            The context name, or None when no usable value is stored.

        Raises:
            ConfigLoadError: If the file exists but cannot be read or decoded.
        """
        path = cls.last_context_path()
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ConfigLoadError(f"Cannot read {path}: {exc}") from exc

        if len(raw) > _MAX_CONTEXT_BYTES:
            raise ConfigLoadError(f"{path} is too large to be a context name")
        try:
            text = raw.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise ConfigLoadError(f"{path} is not valid UTF-8") from exc
        if not text or "\n" in text or "\x00" in text:
            return None
        return text

    @classmethod
    def save(cls, context: str) -> Path:
        """Write ``context`` to the last-context file with mode 0600.

        Raises:
            ConfigSaveError: If the directory or file cannot be written.
        """
        name = context.strip()
        if not name:
            raise ConfigSaveError("Refusing to persist an empty context name")

        directory = cls.config_dir()
        path = directory / LAST_CONTEXT_FILE_NAME
        tmp_path = directory / f".{LAST_CONTEXT_FILE_NAME}.{os.getpid()}.tmp"
        try:
            directory.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
            fd = os.open(
                tmp_path,
                os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_NOFOLLOW", 0),
                _FILE_MODE,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(f"{name}\n")
            os.chmod(tmp_path, _FILE_MODE)
            os.replace(tmp_path, path)
        except OSError as exc:
            with suppress(OSError):
                tmp_path.unlink()
            raise ConfigSaveError(f"Cannot write {path}: {exc}") from exc
        return path


def load_last_context() -> str | None:
    """Best-effort read of the persisted context; failures are logged."""
    try:
        return ConfigManager.load()
    except ConfigLoadError as exc:
        logger.warning("Ignoring saved context: %s", exc)
        return None


def save_last_context(context: str) -> bool:
    """Best-effort write of the persisted context; failures are logged."""
    try:
        path = ConfigManager.save(context)
    except ConfigSaveError as exc:
        logger.warning("Could not persist last context: %s", exc)
        return False
    logger.debug("Saved last context %r to %s", context, path)
    return True


__all__ = ["ConfigManager", "load_last_context", "save_last_context"]
