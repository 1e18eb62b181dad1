"""Unit tests for StatusHealth classification, priority and color."""

from __future__ import annotations

import pytest

from kubefuzz.models.core.status_health import StatusHealth

# =============================================================================
# Classification rules
# =============================================================================


class TestClassify:
    """Test StatusHealth.classify rule precedence."""

    @pytest.mark.parametrize(
        "status",
        [
            "Failed",
            "Error",
            "OOMKilled",
            "NotReady",
            "Lost",
            "Evicted",
            "BackOff",
            "CrashLoopBackOff",
            "ErrImagePull",
            "ImagePullBackOff",
            "Init:Error",
            "Init:ErrImagePull",
            "Init:ImagePullBackOff",
            "Failed(3)",
        ],
    )
    def test_critical_statuses(self, status: str) -> None:
        assert StatusHealth.classify(status) is StatusHealth.CRITICAL

    @pytest.mark.parametrize(
        "status",
        ["Pending", "Terminating", "ContainerCreating", "Unknown", "Init:0/2", "Init:Waiting"],
    )
    def test_warning_statuses(self, status: str) -> None:
        assert StatusHealth.classify(status) is StatusHealth.WARNING

    @pytest.mark.parametrize(
        "status",
        [
            "Running",
            "Active",
            "Bound",
            "Complete",
            "Succeeded",
            "Ready",
            "Scheduled",
            "ClusterIP",
            "NodePort",
            "LoadBalancer",
            "Active(2)",
        ],
    )
    def test_healthy_statuses(self, status: str) -> None:
        assert StatusHealth.classify(status) is StatusHealth.HEALTHY

    def test_deleted_sentinel_is_unknown(self) -> None:
        assert StatusHealth.classify("[DELETED]") is StatusHealth.UNKNOWN

    def test_init_critical_prefix_wins_over_init_warning(self) -> None:
        """Init:CrashLoopBackOff is not a critical prefix; Init:Error is."""
        assert StatusHealth.classify("Init:Error") is StatusHealth.CRITICAL
        assert StatusHealth.classify("Init:CrashLoopBackOff") is StatusHealth.WARNING

    def test_unknown_exact_is_warning_not_unknown_tier(self) -> None:
        """The literal ``Unknown`` status is a warning; only the sentinel is UNKNOWN."""
        assert StatusHealth.classify("Unknown") is StatusHealth.WARNING


class TestRatioStatuses:
    """Test ``ready/desired`` ratio handling."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("3/3", StatusHealth.HEALTHY),
            ("1/1", StatusHealth.HEALTHY),
            ("0/0", StatusHealth.HEALTHY),
            ("0/3", StatusHealth.WARNING),
            ("2/3", StatusHealth.WARNING),
        ],
    )
    def test_ratio(self, status: str, expected: StatusHealth) -> None:
        assert StatusHealth.classify(status) is expected

    def test_non_numeric_ratio_compares_text(self) -> None:
        assert StatusHealth.classify("kubernetes.io/tls") is StatusHealth.WARNING


class TestUnrecognizedStatuses:
    """Unrecognized statuses default to healthy (optimistic default)."""

    def test_unrecognized_status_defaults_to_healthy(self) -> None:
        assert StatusHealth.classify("SomeFutureStatus") is StatusHealth.HEALTHY

    def test_empty_string_defaults_to_healthy(self) -> None:
        assert StatusHealth.classify("") is StatusHealth.HEALTHY

    @pytest.mark.parametrize("value", [None, 42, 3.5, ["Failed"], {"phase": "Running"}])
    def test_non_string_input_never_raises(self, value: object) -> None:
        assert StatusHealth.classify(value) in set(StatusHealth)

    def test_non_string_input_is_coerced(self) -> None:
        class Weird:
            def __str__(self) -> str:
                return "OOMKilled"

        assert StatusHealth.classify(Weird()) is StatusHealth.CRITICAL


# =============================================================================
# Priority and color
# =============================================================================


class TestPriorityAndColor:
    """Test priority() and color() come from the same tier."""

    def test_priorities(self) -> None:
        assert StatusHealth.CRITICAL.priority() == 0
        assert StatusHealth.WARNING.priority() == 1
        assert StatusHealth.UNKNOWN.priority() == 1
        assert StatusHealth.HEALTHY.priority() == 2

    def test_colors(self) -> None:
        assert StatusHealth.CRITICAL.color() == "red"
        assert StatusHealth.WARNING.color() == "yellow"
        assert StatusHealth.HEALTHY.color() == "green"
        assert StatusHealth.UNKNOWN.color() == "bright_black"

    def test_every_tier_has_priority_and_color(self) -> None:
        for health in StatusHealth:
            assert isinstance(health.priority(), int)
            assert isinstance(health.color(), str)
