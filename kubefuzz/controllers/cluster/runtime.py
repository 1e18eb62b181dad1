"""Background event loop hosting watchers and aggregators.

The UI owns the main thread and suspends it while actions run, so the watch
engine lives on its own loop in a daemon thread. Coroutines are submitted
with ``run_coroutine_threadsafe``; everything else crosses the thread
boundary as published snapshots.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

from kubefuzz.constants.timeouts import RUNTIME_SHUTDOWN_TIMEOUT

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WatchRuntime:
    """Owns the watch loop thread."""

    def __init__(self, name: str = "kubefuzz-watch") -> None:
        self.name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            raise RuntimeError("Watch runtime is not started")
        return self._loop

    def start(self) -> WatchRuntime:
        if self.is_running:
            return self
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self._ready.wait()
        return self

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            try:
                self._cancel_remaining(loop)
                loop.run_until_complete(loop.shutdown_asyncgens())
            finally:
                loop.close()
                logger.debug("Watch runtime loop closed")

    @staticmethod
    def _cancel_remaining(loop: asyncio.AbstractEventLoop) -> None:
        pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
        if not pending:
            return
        for task in pending:
            task.cancel()
        loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))

    def submit(self, coro: Coroutine[Any, Any, T]) -> concurrent.futures.Future[T]:
        """Schedule ``coro`` on the watch loop from any other thread."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def run(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Run ``coro`` on the watch loop and block for its result."""
        return self.submit(coro).result(timeout)

    def stop(self, timeout: float = RUNTIME_SHUTDOWN_TIMEOUT) -> None:
        """Stop the loop; pending tasks are cancelled and awaited first."""
        if not self.is_running or self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        assert self._thread is not None
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Watch runtime did not stop within %.1fs", timeout)
        self._thread = None
        self._loop = None

    def __enter__(self) -> WatchRuntime:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = ["WatchRuntime"]
