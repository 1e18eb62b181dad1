"""Aggregator - the single owner of the live item view of one context.

Watchers never touch the view directly: they post messages onto a queue and
the aggregator task applies them, re-sorts once per drained batch and
publishes an immutable snapshot. Readers on other threads only ever see a
complete ``(version, items)`` pair.
"""

from __future__ import annotations

import asyncio
import heapq
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from kubefuzz.constants.enums import ResourceKind
from kubefuzz.models.core.item import Item, ItemKey
from kubefuzz.models.core.status_health import StatusHealth

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Upsert:
    item: Item


@dataclass(frozen=True)
class _Resync:
    context: str
    kind: ResourceKind
    items: tuple[Item, ...]


@dataclass(frozen=True)
class _Reset:
    items: tuple[Item, ...]


_Message = _Upsert | _Resync | _Reset


class Aggregator:
    """Collects watcher output for one context into a sorted snapshot."""

    def __init__(self, label: str = "") -> None:
        self.label = label
        self._queue: asyncio.Queue[_Message] = asyncio.Queue()
        self._items: dict[ItemKey, Item] = {}
        self._published: tuple[int, tuple[Item, ...]] = (0, ())

    def __repr__(self) -> str:
        return f"Aggregator(label={self.label!r}, version={self.version})"

    # Producer side -----------------------------------------------------------

    def emit(self, item: Item) -> None:
        """Queue one added, modified or deleted item."""
        self._queue.put_nowait(_Upsert(item))

    def emit_batch(self, kind: ResourceKind, items: Iterable[Item], context: str = "") -> None:
        """Queue a full listing of ``kind`` that replaces what is held for it."""
        self._queue.put_nowait(_Resync(context, kind, tuple(items)))

    def replace_all(self, items: Iterable[Item]) -> None:
        """Queue a wholesale replacement of the view (demo data)."""
        self._queue.put_nowait(_Reset(tuple(items)))

    # Owner side --------------------------------------------------------------

    def _apply(self, message: _Message) -> None:
        if isinstance(message, _Upsert):
            self._items[message.item.key] = message.item
        elif isinstance(message, _Resync):
            stale = [
                key
                for key in self._items
                if key[0] == message.context and key[1] is message.kind
            ]
            for key in stale:
                del self._items[key]
            for item in message.items:
                self._items[item.key] = item
        else:
            self._items = {item.key: item for item in message.items}

    def _drain(self) -> int:
        applied = 0
        while True:
            try:
                message = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return applied
            self._apply(message)
            applied += 1

    def process_pending(self) -> bool:
        """Apply every queued message and publish if anything changed."""
        if not self._drain():
            return False
        self._publish()
        return True

    def _publish(self) -> None:
        ordered = tuple(sorted(self._items.values(), key=Item.sort_key))
        self._published = (self._published[0] + 1, ordered)

    async def run(self) -> None:
        """Owner loop: wait for a message, drain the rest, publish once."""
        logger.debug("Aggregator %r started", self.label)
        try:
            while True:
                message = await self._queue.get()
                self._apply(message)
                self._drain()
                self._publish()
        finally:
            logger.debug("Aggregator %r stopped", self.label)

    # Reader side -------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._published[0]

    def snapshot(self) -> tuple[Item, ...]:
        return self._published[1]

    def versioned_snapshot(self) -> tuple[int, tuple[Item, ...]]:
        return self._published

    def counts_by_health(self) -> Counter[StatusHealth]:
        return count_by_health(self.snapshot())


class MergedView:
    """Read-only union of several aggregators under the same ordering."""

    def __init__(self, aggregators: Sequence[Aggregator]) -> None:
        self.aggregators = tuple(aggregators)
        self._cache: tuple[tuple[int, ...], tuple[Item, ...]] | None = None

    @property
    def version(self) -> int:
        return sum(aggregator.version for aggregator in self.aggregators)

    def versioned_snapshot(self) -> tuple[int, tuple[Item, ...]]:
        published = [aggregator.versioned_snapshot() for aggregator in self.aggregators]
        versions = tuple(version for version, _ in published)
        if self._cache is None or self._cache[0] != versions:
            merged = tuple(
                heapq.merge(*(items for _, items in published), key=Item.sort_key)
            )
            self._cache = (versions, merged)
        return sum(versions), self._cache[1]

    def snapshot(self) -> tuple[Item, ...]:
        return self.versioned_snapshot()[1]

    def counts_by_health(self) -> Counter[StatusHealth]:
        return count_by_health(self.snapshot())


def count_by_health(items: Iterable[Item]) -> Counter[StatusHealth]:
    return Counter(item.health for item in items)


__all__ = ["Aggregator", "MergedView", "count_by_health"]
