"""Per-process runtime directory and preview-mode state.

The directory is private to the current user (mode 0700), never reuses a
path it does not own, and is removed when the process exits.
"""

from __future__ import annotations

import atexit
import logging
import os
import shutil
import signal
import stat
import sys
import tempfile
from contextlib import suppress
from pathlib import Path
from types import FrameType
from typing import Any

from kubefuzz.constants.defaults import PREVIEW_MODE_FILE_NAME, RUNTIME_DIR_PREFIX
from kubefuzz.constants.enums import PreviewMode

logger = logging.getLogger(__name__)


class RuntimeDirError(OSError):
    """Raised when a safe runtime directory cannot be created."""


def runtime_base_dir() -> Path:
    """``$XDG_RUNTIME_DIR`` when set, else the system temporary directory."""
    xdg = os.environ.get("XDG_RUNTIME_DIR")
    return Path(xdg) if xdg else Path(tempfile.gettempdir())


class RuntimeDir:
    """Scoped ``kubefuzz-<pid>`` directory holding UI handoff files.

    Usable as a context manager. ``create()`` also registers ``atexit`` and
    SIGTERM cleanup so the directory does not outlive the process.
    """

    def __init__(self, base: Path | None = None, pid: int | None = None) -> None:
        self.base = base or runtime_base_dir()
        self.path = self.base / f"{RUNTIME_DIR_PREFIX}{pid or os.getpid()}"
        self._created = False
        self._previous_sigterm: Any = None

    def __repr__(self) -> str:
        return f"RuntimeDir({str(self.path)!r})"

    def _check_existing(self) -> None:
        """Accept a pre-existing path only if it is our own plain directory."""
        info = self.path.lstat()
        if stat.S_ISLNK(info.st_mode):
            raise RuntimeDirError(f"Refusing symlinked runtime dir {self.path}")
        if not stat.S_ISDIR(info.st_mode):
            raise RuntimeDirError(f"Runtime path {self.path} is not a directory")
        if info.st_uid != os.getuid():
            raise RuntimeDirError(f"Runtime dir {self.path} is owned by another user")
        os.chmod(self.path, 0o700)

    def create(self) -> Path:
        if self._created:
            return self.path
        try:
            os.mkdir(self.path, 0o700)
        except FileExistsError:
            self._check_existing()
        except OSError as exc:
            raise RuntimeDirError(f"Cannot create runtime dir {self.path}: {exc}") from exc
        # mkdir honours the umask; set the mode explicitly.
        os.chmod(self.path, 0o700)
        self._created = True
        atexit.register(self.cleanup)
        self._install_sigterm_handler()
        logger.debug("Created runtime dir %s", self.path)
        return self.path

    def _install_sigterm_handler(self) -> None:
        try:
            self._previous_sigterm = signal.signal(signal.SIGTERM, self._on_sigterm)
        except ValueError:
            # Not on the main thread; atexit still covers normal exit.
            self._previous_sigterm = None

    def _on_sigterm(self, signum: int, frame: FrameType | None) -> None:
        self.cleanup()
        sys.exit(128 + signum)

    def cleanup(self) -> None:
        if not self._created:
            return
        self._created = False
        with suppress(ValueError, TypeError):
            if self._previous_sigterm is not None:
                signal.signal(signal.SIGTERM, self._previous_sigterm)
        with suppress(AttributeError):
            atexit.unregister(self.cleanup)
        shutil.rmtree(self.path, ignore_errors=True)
        logger.debug("Removed runtime dir %s", self.path)

    def file(self, name: str) -> Path:
        return self.path / name

    def write_file(self, name: str, content: str) -> Path:
        """Write an owner-only file inside the directory."""
        target = self.file(name)
        fd = os.open(
            target,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_NOFOLLOW", 0),
            0o600,
        )
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        return target

    def __enter__(self) -> RuntimeDir:
        self.create()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()


class PreviewState:
    """Current preview mode (describe -> yaml -> logs), owned by the UI.

    Each change is mirrored to the runtime directory when one is attached.
    """

    def __init__(
        self,
        mode: PreviewMode = PreviewMode.DESCRIBE,
        runtime_dir: RuntimeDir | None = None,
    ) -> None:
        self._mode = mode
        self.runtime_dir = runtime_dir

    @property
    def mode(self) -> PreviewMode:
        return self._mode

    def set(self, mode: PreviewMode) -> PreviewMode:
        self._mode = mode
        self._mirror()
        return mode

    def cycle(self) -> PreviewMode:
        return self.set(self._mode.next())

    def _mirror(self) -> None:
        if self.runtime_dir is None:
            return
        try:
            self.runtime_dir.write_file(PREVIEW_MODE_FILE_NAME, f"{self._mode.value}\n")
        except OSError as exc:
            logger.warning("Could not record preview mode: %s", exc)


__all__ = ["PreviewState", "RuntimeDir", "RuntimeDirError", "runtime_base_dir"]
