"""Tests for Aggregator and MergedView."""

from __future__ import annotations

import asyncio

import pytest

from kubefuzz.constants.enums import ResourceKind
from kubefuzz.controllers.cluster.aggregator import Aggregator, MergedView, count_by_health
from kubefuzz.models.core.status_health import StatusHealth


def _names(items) -> list[str]:
    return [item.name for item in items]


class TestAggregatorUpdates:
    """Test how queued messages change the held view."""

    def test_nothing_published_before_processing(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("a"))

        assert aggregator.version == 0
        assert aggregator.snapshot() == ()

    def test_process_pending_publishes_once(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("a"))
        aggregator.emit(make_item("b"))

        assert aggregator.process_pending() is True
        assert aggregator.version == 1
        assert _names(aggregator.snapshot()) == ["a", "b"]
        assert aggregator.process_pending() is False
        assert aggregator.version == 1

    def test_same_identity_replaces(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("web", status="Pending"))
        aggregator.emit(make_item("web", status="Running"))
        aggregator.process_pending()

        snapshot = aggregator.snapshot()
        assert len(snapshot) == 1
        assert snapshot[0].status == "Running"

    def test_same_name_in_other_namespace_is_distinct(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("web", namespace="a"))
        aggregator.emit(make_item("web", namespace="b"))
        aggregator.process_pending()

        assert len(aggregator.snapshot()) == 2

    def test_deleted_items_are_kept_with_sentinel(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("web"))
        aggregator.emit(make_item("web", status="[DELETED]"))
        aggregator.process_pending()

        (item,) = aggregator.snapshot()
        assert item.is_deleted
        assert item.health is StatusHealth.UNKNOWN

    def test_resync_drops_stale_items_of_that_kind_only(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("old-pod"))
        aggregator.emit(make_item("svc", kind=ResourceKind.SERVICE, status="ClusterIP"))
        aggregator.emit_batch(ResourceKind.POD, [make_item("new-pod")])
        aggregator.process_pending()

        assert sorted(_names(aggregator.snapshot())) == ["new-pod", "svc"]

    def test_resync_is_scoped_to_context(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("a", context="prod"))
        aggregator.emit(make_item("b", context="dev"))
        aggregator.emit_batch(ResourceKind.POD, [], context="prod")
        aggregator.process_pending()

        assert _names(aggregator.snapshot()) == ["b"]

    def test_replace_all(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("a"))
        aggregator.replace_all([make_item("demo")])
        aggregator.process_pending()

        assert _names(aggregator.snapshot()) == ["demo"]


class TestAggregatorOrdering:
    """Test health-then-name ordering of the snapshot."""

    def test_health_then_name(self, make_item) -> None:
        aggregator = Aggregator()
        for name, status in [
            ("zeta", "Running"),
            ("beta", "Pending"),
            ("alpha", "Running"),
            ("omega", "CrashLoopBackOff"),
            ("gamma", "1/3"),
        ]:
            aggregator.emit(make_item(name, status=status))
        aggregator.process_pending()

        assert _names(aggregator.snapshot()) == ["omega", "beta", "gamma", "alpha", "zeta"]

    def test_status_change_moves_item(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("a", status="Running"))
        aggregator.emit(make_item("b", status="Running"))
        aggregator.process_pending()
        aggregator.emit(make_item("b", status="Error"))
        aggregator.process_pending()

        assert _names(aggregator.snapshot()) == ["b", "a"]

    def test_counts_by_health(self, make_item) -> None:
        aggregator = Aggregator()
        aggregator.emit(make_item("a", status="Error"))
        aggregator.emit(make_item("b", status="Running"))
        aggregator.emit(make_item("c", status="Running"))
        aggregator.process_pending()

        counts = aggregator.counts_by_health()
        assert counts[StatusHealth.CRITICAL] == 1
        assert counts[StatusHealth.HEALTHY] == 2
        assert counts[StatusHealth.WARNING] == 0


class TestAggregatorRun:
    """Test the owner loop."""

    @pytest.mark.asyncio
    async def test_run_publishes_crashing_pod_first(self, make_item) -> None:
        aggregator = Aggregator("test")
        task = asyncio.create_task(aggregator.run())
        try:
            aggregator.emit(make_item("api", status="Running"))
            aggregator.emit(make_item("frontend", status="Pending"))
            aggregator.emit(make_item("worker", status="CrashLoopBackOff"))
            for _ in range(5):
                await asyncio.sleep(0)
        finally:
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert _names(aggregator.snapshot()) == ["worker", "frontend", "api"]
        assert aggregator.version >= 1


class TestMergedView:
    """Test the union view used in multi-context mode."""

    def test_merges_under_same_ordering(self, make_item) -> None:
        prod = Aggregator("prod")
        dev = Aggregator("dev")
        prod.emit(make_item("b", status="Running", context="prod"))
        prod.emit(make_item("z", status="Error", context="prod"))
        dev.emit(make_item("a", status="Running", context="dev"))
        dev.emit(make_item("y", status="Pending", context="dev"))
        prod.process_pending()
        dev.process_pending()

        view = MergedView([prod, dev])

        assert _names(view.snapshot()) == ["z", "y", "a", "b"]
        assert view.version == 2

    def test_cache_tracks_versions(self, make_item) -> None:
        prod = Aggregator("prod")
        view = MergedView([prod])
        first = view.snapshot()

        prod.emit(make_item("a", context="prod"))
        prod.process_pending()

        assert first == ()
        assert _names(view.snapshot()) == ["a"]
        assert view.snapshot() is view.snapshot()

    def test_count_by_health(self, make_item) -> None:
        counts = count_by_health([make_item(status="Pending"), make_item("b", status="Init:0/1")])
        assert counts[StatusHealth.WARNING] == 2
