"""Tests for ContextManager lifecycle, demo fallback and persistence."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from kubefuzz.constants.enums import ContextSource, ResourceKind
from kubefuzz.controllers.base import Listing
from kubefuzz.controllers.cluster.aggregator import Aggregator, MergedView
from kubefuzz.controllers.cluster.context_manager import ContextManager
from kubefuzz.controllers.cluster.controller import ClusterController
from kubefuzz.models.state import load_last_context, save_last_context
from kubefuzz.tests.fakes import FakeController, pod_object


class _HangingController(FakeController):
    async def list_objects(self, kind, namespace=None):
        self.list_calls.append((kind, namespace))
        await asyncio.Event().wait()
        return Listing()


def _manager(controllers: dict[str, FakeController], **kwargs) -> ContextManager:
    kwargs.setdefault("kinds", (ResourceKind.POD,))
    kwargs.setdefault("first_init_timeout", 2.0)
    return ContextManager(controller_factory=lambda name, _kc: controllers[name], **kwargs)


async def _published(view: Aggregator | MergedView, rounds: int = 20):
    for _ in range(rounds):
        await asyncio.sleep(0)
    return view.snapshot()


class TestContextManagerInit:
    """Test construction and context resolution."""

    def test_requires_kinds(self) -> None:
        with pytest.raises(ValueError):
            ContextManager(kinds=())

    def test_resolve_caches_controller(self) -> None:
        created: list[str] = []

        def factory(name: str, _kubeconfig: str | None) -> FakeController:
            created.append(name)
            return FakeController(name)

        manager = ContextManager(controller_factory=factory)
        assert manager.resolve("prod") is manager.resolve("prod")
        assert created == ["prod"]

    def test_current_context_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            ClusterController, "resolve_current_context", staticmethod(lambda *_a, **_k: None)
        )
        assert ContextManager().current_context() == "unknown"

    def test_initial_context_precedence(
        self, isolated_dirs: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            ClusterController,
            "resolve_current_context",
            staticmethod(lambda *_a, **_k: "kube-current"),
        )
        manager = ContextManager()

        assert manager.initial_context() == "kube-current"
        save_last_context("saved")
        assert manager.initial_context() == "saved"
        assert manager.initial_context("explicit") == "explicit"

    def test_blocking_wrappers_need_runtime(self) -> None:
        with pytest.raises(RuntimeError):
            ContextManager().start("prod")


class TestContextManagerLifecycle:
    """Test starting, switching and stopping contexts on the watch loop."""

    @pytest.mark.asyncio
    async def test_start_single_context(self) -> None:
        controller = FakeController("prod", listings={ResourceKind.POD: [pod_object("web")]})
        manager = _manager({"prod": controller})
        try:
            ctx = await manager.async_start("prod")
            items = await _published(manager.view())
        finally:
            await manager.async_stop()

        assert ctx.source is ContextSource.CLUSTER
        assert manager.active_names == []
        assert [item.name for item in items] == ["web"]
        assert items[0].context == ""

    @pytest.mark.asyncio
    async def test_unreachable_context_shows_demo_data(self) -> None:
        controller = FakeController(
            "prod", list_error=RuntimeError("error: Unable to connect to the server")
        )
        manager = _manager({"prod": controller})
        try:
            ctx = await manager.async_start("prod")
            assert ctx.source is ContextSource.DEMO
            assert ctx.watchers == []
            items = await _published(manager.view())
            warnings = manager.pop_warnings()
        finally:
            await manager.async_stop()

        assert [item.name for item in items] == [
            "api-server-7d9f8b6c5-xk2lp",
            "frontend-5c7d8e9f0-ab1cd",
            "worker-6f8b9c4d7-mn3qr",
        ]
        assert [item.status for item in items] == ["CrashLoopBackOff", "Pending", "Running"]
        assert len(warnings) == 1
        assert "Unable to connect to the server" in warnings[0]
        assert manager.pop_warnings() == []

    @pytest.mark.asyncio
    async def test_first_listing_timeout_shows_demo_data(self) -> None:
        manager = _manager({"slow": _HangingController("slow")}, first_init_timeout=0.05)
        try:
            ctx = await manager.async_start("slow")
        finally:
            await manager.async_stop()

        assert ctx.source is ContextSource.DEMO
        assert "no response" in manager.pop_warnings()[0]

    @pytest.mark.asyncio
    async def test_demo_falls_back_to_all_items_when_kind_has_none(self) -> None:
        manager = _manager(
            {"prod": FakeController("prod", list_error=RuntimeError("down"))},
            kinds=(ResourceKind.JOB,),
        )
        try:
            await manager.async_start("prod")
            items = await _published(manager.view())
        finally:
            await manager.async_stop()

        assert len(items) == 11

    @pytest.mark.asyncio
    async def test_start_all_labels_and_merges(self) -> None:
        controllers = {
            "prod": FakeController("prod", listings={ResourceKind.POD: [pod_object("b")]}),
            "dev": FakeController("dev", listings={ResourceKind.POD: [pod_object("a")]}),
        }
        manager = _manager(controllers)
        try:
            await manager.async_start_all(["prod", "dev"])
            view = manager.view()
            items = await _published(view)
            assert manager.is_multi_context
        finally:
            await manager.async_stop()

        assert isinstance(view, MergedView)
        assert [(item.context, item.name) for item in items] == [("dev", "a"), ("prod", "b")]

    @pytest.mark.asyncio
    async def test_merged_view_is_reused_between_polls(self) -> None:
        controllers = {
            "prod": FakeController("prod", listings={ResourceKind.POD: [pod_object("b")]}),
            "dev": FakeController("dev", listings={ResourceKind.POD: [pod_object("a")]}),
        }
        manager = _manager(controllers)
        try:
            await manager.async_start_all(["prod", "dev"])
            first = manager.view()
            await _published(first)
            second = manager.view()
            assert second is first
            assert first.snapshot() is second.snapshot()
        finally:
            await manager.async_stop()

        assert manager.view() is not first
        assert manager.view().snapshot() == ()

    @pytest.mark.asyncio
    async def test_switch_persists_and_replaces(self, isolated_dirs: Path) -> None:
        controllers = {
            "prod": FakeController("prod", listings={ResourceKind.POD: [pod_object("old")]}),
            "dev": FakeController("dev", listings={ResourceKind.POD: [pod_object("new")]}),
        }
        manager = _manager(controllers)
        try:
            await manager.async_start("prod")
            old_ctx = manager.active[0]
            await manager.async_switch("dev")
            items = await _published(manager.view())
        finally:
            await manager.async_stop()

        assert [item.name for item in items] == ["new"]
        assert all(watcher.task is not None and watcher.task.done() for watcher in old_ctx.watchers)
        assert load_last_context() == "dev"
