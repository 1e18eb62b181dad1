"""Context manager - builds, starts, switches and tears down watch contexts."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from kubefuzz.constants.defaults import CURRENT_CONTEXT_FALLBACK
from kubefuzz.constants.enums import ALL_KINDS, ContextSource, ResourceKind
from kubefuzz.constants.timeouts import FIRST_INIT_TIMEOUT
from kubefuzz.controllers.base import BaseController
from kubefuzz.controllers.cluster.aggregator import Aggregator, MergedView
from kubefuzz.controllers.cluster.controller import ClusterController
from kubefuzz.controllers.cluster.demo import demo_items
from kubefuzz.controllers.cluster.runtime import WatchRuntime
from kubefuzz.controllers.cluster.watcher import ResourceWatcher
from kubefuzz.models.core.item import Item
from kubefuzz.models.state import load_last_context, save_last_context

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[str, str | None], BaseController]


def _default_factory(context: str, kubeconfig: str | None) -> BaseController:
    return ClusterController(context=context, kubeconfig=kubeconfig)


@dataclass
class WatchContext:
    """One running context: its client, aggregator and watchers."""

    name: str
    label: str
    controller: BaseController
    namespace: str | None
    aggregator: Aggregator
    watchers: list[ResourceWatcher] = field(default_factory=list)
    source: ContextSource = ContextSource.CLUSTER
    aggregator_task: asyncio.Task[None] | None = None

    async def stop_watchers(self) -> None:
        await asyncio.gather(
            *(watcher.stop() for watcher in self.watchers), return_exceptions=True
        )

    async def stop(self) -> None:
        """Stop every watcher, then the aggregator task."""
        await self.stop_watchers()
        if self.aggregator_task is not None:
            self.aggregator_task.cancel()
            try:
                await self.aggregator_task
            except asyncio.CancelledError:
                pass
        logger.info("Stopped watch context %r", self.name)


class ContextManager:
    """Resolves kubeconfig contexts and owns the running watch contexts.

    The ``async_*`` methods run on the watch loop; the plain methods are
    blocking wrappers for the UI thread that submit them to ``runtime``.
    """

    def __init__(
        self,
        runtime: WatchRuntime | None = None,
        *,
        kubeconfig: str | None = None,
        namespace: str | None = None,
        kinds: Sequence[ResourceKind] = ALL_KINDS,
        controller_factory: ControllerFactory = _default_factory,
        first_init_timeout: float = FIRST_INIT_TIMEOUT,
    ) -> None:
        if not kinds:
            raise ValueError("at least one resource kind is required")
        self.runtime = runtime
        self.kubeconfig = kubeconfig
        self.namespace = namespace
        self.kinds = tuple(kinds)
        self.first_init_timeout = first_init_timeout
        self._controller_factory = controller_factory
        self._controllers: dict[str, BaseController] = {}
        self._active: list[WatchContext] = []
        self._view: Aggregator | MergedView = MergedView(())
        self._warnings: deque[str] = deque()

    # Resolution and persistence ----------------------------------------------

    def list_contexts(self) -> list[str]:
        return ClusterController.list_contexts(self.kubeconfig)

    def current_context(self) -> str:
        return (
            ClusterController.resolve_current_context(self.kubeconfig)
            or CURRENT_CONTEXT_FALLBACK
        )

    def resolve(self, name: str | None = None) -> BaseController:
        """Return the cached client for ``name`` (default: current context)."""
        context = name or self.current_context()
        controller = self._controllers.get(context)
        if controller is None:
            controller = self._controller_factory(context, self.kubeconfig)
            self._controllers[context] = controller
        return controller

    def persist_last(self, name: str) -> bool:
        return save_last_context(name)

    def load_last(self) -> str | None:
        return load_last_context()

    def initial_context(self, requested: str | None = None) -> str:
        """Startup context: requested, else persisted, else kubeconfig current."""
        return requested or self.load_last() or self.current_context()

    # Warnings ------------------------------------------------------------------

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self._warnings.append(message)

    def pop_warnings(self) -> list[str]:
        """Drain warnings raised since the last call (safe from any thread)."""
        drained: list[str] = []
        while self._warnings:
            drained.append(self._warnings.popleft())
        return drained

    # Active view ---------------------------------------------------------------

    @property
    def active(self) -> tuple[WatchContext, ...]:
        return tuple(self._active)

    @property
    def active_names(self) -> list[str]:
        return [ctx.name for ctx in self._active]

    @property
    def is_multi_context(self) -> bool:
        return len(self._active) > 1 or any(ctx.label for ctx in self._active)

    def view(self) -> Aggregator | MergedView:
        """The readable view the UI polls; one object per started set of contexts."""
        return self._view

    def _activate(self, contexts: list[WatchContext]) -> None:
        self._active = contexts
        if len(contexts) == 1:
            self._view = contexts[0].aggregator
        else:
            self._view = MergedView([ctx.aggregator for ctx in contexts])

    # Lifecycle (watch loop) ----------------------------------------------------

    async def _start_context(self, name: str, label: str) -> WatchContext:
        controller = self.resolve(name)
        aggregator = Aggregator(label)
        ctx = WatchContext(
            name=name,
            label=label,
            controller=controller,
            namespace=self.namespace,
            aggregator=aggregator,
        )
        ctx.aggregator_task = asyncio.create_task(
            aggregator.run(), name=f"aggregate-{name}"
        )
        for kind in self.kinds:
            watcher = ResourceWatcher(
                controller,
                kind,
                aggregator,
                namespace=self.namespace,
                context_label=label,
            )
            watcher.start()
            ctx.watchers.append(watcher)

        failure = await self._await_first_init(ctx.watchers[0])
        if failure is not None:
            self._warn(f"Cannot reach context {name!r} ({failure}); showing demo data")
            await ctx.stop_watchers()
            ctx.watchers.clear()
            ctx.source = ContextSource.DEMO
            aggregator.replace_all(self._demo_dataset(label))
        else:
            logger.info("Watching %d kinds in context %r", len(ctx.watchers), name)
        return ctx

    async def _await_first_init(self, watcher: ResourceWatcher) -> str | None:
        """Return a failure description, or None once the first listing landed."""
        assert watcher.first_init is not None
        try:
            outcome = await asyncio.wait_for(
                asyncio.shield(watcher.first_init), self.first_init_timeout
            )
        except asyncio.TimeoutError:
            return f"no response within {self.first_init_timeout:g}s"
        if outcome is None:
            return None
        return ClusterController._summarize_connection_error(outcome)

    def _demo_dataset(self, label: str) -> list[Item]:
        items = demo_items(label, self.kinds)
        return items or demo_items(label)

    async def async_stop(self) -> None:
        """Stop every active context."""
        active, self._active = self._active, []
        self._view = MergedView(())
        await asyncio.gather(*(ctx.stop() for ctx in active), return_exceptions=True)

    async def async_start(self, name: str | None = None) -> WatchContext:
        """Start a single-context view (items carry no context label)."""
        await self.async_stop()
        context = name or self.current_context()
        ctx = await self._start_context(context, "")
        self._activate([ctx])
        return ctx

    async def async_start_all(self, names: Sequence[str]) -> list[WatchContext]:
        """Start one labelled context per name, merged into one view."""
        await self.async_stop()
        contexts = list(
            await asyncio.gather(*(self._start_context(name, name) for name in names))
        )
        self._activate(contexts)
        return contexts

    async def async_switch(self, name: str) -> WatchContext:
        """Tear down the running context(s), persist ``name`` and start it."""
        previous = self.active_names
        await self.async_stop()
        logger.info("Switching context %s -> %r", previous or "-", name)
        self.persist_last(name)
        return await self.async_start(name)

    # Blocking wrappers (UI thread) ----------------------------------------------

    def _runtime(self) -> WatchRuntime:
        if self.runtime is None:
            raise RuntimeError("ContextManager has no watch runtime")
        return self.runtime

    def start(self, name: str | None = None) -> WatchContext:
        return self._runtime().run(self.async_start(name))

    def start_all(self, names: Sequence[str]) -> list[WatchContext]:
        return self._runtime().run(self.async_start_all(names))

    def switch(self, name: str) -> WatchContext:
        return self._runtime().run(self.async_switch(name))

    def stop(self) -> None:
        if self.runtime is not None and self.runtime.is_running:
            self.runtime.run(self.async_stop())


__all__ = ["ContextManager", "WatchContext"]
