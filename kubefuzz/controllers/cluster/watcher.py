"""Per-kind watcher: list, flush, stream and reconnect for one resource kind."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from kubefuzz.constants.enums import ResourceKind, WatchEventType, WatchPhase
from kubefuzz.constants.timeouts import (
    WATCH_BACKOFF_FACTOR,
    WATCH_BACKOFF_INITIAL,
    WATCH_BACKOFF_MAX,
)
from kubefuzz.controllers.base import BaseController
from kubefuzz.controllers.cluster.aggregator import Aggregator
from kubefuzz.controllers.cluster.fetchers import WatchStreamError
from kubefuzz.controllers.cluster.parsers import StatusParser
from kubefuzz.models.core.item import Item

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ExponentialBackoff:
    """Reconnect delays: ``initial * factor**n`` capped at ``maximum``."""

    def __init__(
        self,
        initial: float = WATCH_BACKOFF_INITIAL,
        factor: float = WATCH_BACKOFF_FACTOR,
        maximum: float = WATCH_BACKOFF_MAX,
    ) -> None:
        self.initial = initial
        self.factor = factor
        self.maximum = maximum
        self._next = initial

    def next_delay(self) -> float:
        delay = self._next
        self._next = min(self._next * self.factor, self.maximum)
        return delay

    def reset(self) -> None:
        self._next = self.initial


class ResourceWatcher:
    """Keeps the aggregator's view of one (context, kind) pair current.

    ``first_init`` resolves once with ``None`` when the first listing was
    flushed, or with the exception that made it fail. Later failures only
    move the watcher through RECONNECTING; they are never raised.
    """

    def __init__(
        self,
        controller: BaseController,
        kind: ResourceKind,
        aggregator: Aggregator,
        namespace: str | None = None,
        context_label: str = "",
        backoff: ExponentialBackoff | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.controller = controller
        self.kind = kind
        self.aggregator = aggregator
        self.namespace = None if kind.cluster_scoped else namespace
        self.context_label = context_label
        self.backoff = backoff or ExponentialBackoff()
        self._sleep = sleep
        self._parser = StatusParser(kind, context_label)
        self._phase = WatchPhase.INIT
        self._task: asyncio.Task[None] | None = None
        self.first_init: asyncio.Future[BaseException | None] | None = None
        self.reconnects = 0

    def __repr__(self) -> str:
        return (
            f"ResourceWatcher(kind={self.kind.alias!r}, "
            f"context={self.context_label!r}, phase={self._phase.value})"
        )

    @property
    def phase(self) -> WatchPhase:
        return self._phase

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    def _set_phase(self, phase: WatchPhase) -> None:
        if phase is not self._phase:
            logger.debug("%s watcher %s -> %s", self.kind.alias, self._phase.value, phase.value)
        self._phase = phase

    def start(self) -> asyncio.Task[None]:
        """Create ``first_init`` and the watch task on the running loop."""
        loop = asyncio.get_running_loop()
        self.first_init = loop.create_future()
        self._task = loop.create_task(
            self.run(), name=f"watch-{self.context_label or 'current'}-{self.kind.alias}"
        )
        return self._task

    async def stop(self) -> None:
        """Cancel the watch task and wait until it has terminated."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    def _resolve_first_init(self, outcome: BaseException | None) -> None:
        if self.first_init is not None and not self.first_init.done():
            self.first_init.set_result(outcome)

    async def _list_and_flush(self) -> str | None:
        """List, sort and flush; returns the resource version to watch from."""
        self._set_phase(WatchPhase.INIT)
        listing = await self.controller.list_objects(self.kind, self.namespace)

        self._set_phase(WatchPhase.INIT_BUFFERING)
        items: list[Item] = []
        for obj in listing.objects:
            item = self._parser.parse_item(obj)
            if item is not None:
                items.append(item)

        self._set_phase(WatchPhase.INIT_FLUSH)
        items.sort(key=lambda item: (item.health.priority(), item.name))
        self.aggregator.emit_batch(self.kind, items, self.context_label)
        logger.debug(
            "Flushed %d %s items for context %r",
            len(items),
            self.kind.alias,
            self.context_label,
        )
        self.backoff.reset()
        self._resolve_first_init(None)
        return listing.resource_version

    async def _stream(self, resource_version: str | None) -> None:
        self._set_phase(WatchPhase.STREAMING)
        events = self.controller.watch_objects(self.kind, self.namespace, resource_version)
        async for event in events:
            item = self._parser.parse_item(
                event.object, deleted=event.type is WatchEventType.DELETED
            )
            if item is not None:
                self.aggregator.emit(item)
        raise WatchStreamError(f"{self.kind.alias} watch stream ended")

    async def run(self) -> None:
        """Watch until cancelled, reconnecting after any transport failure."""
        try:
            while True:
                try:
                    resource_version = await self._list_and_flush()
                    await self._stream(resource_version)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    self._resolve_first_init(exc)
                    self._set_phase(WatchPhase.RECONNECTING)
                    self.reconnects += 1
                    delay = self.backoff.next_delay()
                    logger.warning(
                        "%s watch for context %r failed (%s); retrying in %.1fs",
                        self.kind.alias,
                        self.context_label or self.controller.context,
                        exc,
                        delay,
                    )
                    await self._sleep(delay)
        finally:
            self._set_phase(WatchPhase.TERMINATED)
            if self.first_init is not None and not self.first_init.done():
                self.first_init.cancel()


__all__ = ["ExponentialBackoff", "ResourceWatcher"]
