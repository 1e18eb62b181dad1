"""Demonstration dataset shown when a context cannot be reached."""

from __future__ import annotations

from kubefuzz.constants.enums import ResourceKind
from kubefuzz.models.core.item import Item

# (kind, namespace, name, status, age)
_DEMO_ROWS: tuple[tuple[ResourceKind, str, str, str, str], ...] = (
    (ResourceKind.POD, "production", "api-server-7d9f8b6c5-xk2lp", "CrashLoopBackOff", "1h"),
    (ResourceKind.POD, "staging", "frontend-5c7d8e9f0-ab1cd", "Pending", "5m"),
    (ResourceKind.POD, "production", "worker-6f8b9c4d7-mn3qr", "Running", "2d"),
    (ResourceKind.DEPLOYMENT, "production", "api-server", "2/3", "2d"),
    (ResourceKind.DEPLOYMENT, "staging", "frontend", "0/1", "5m"),
    (ResourceKind.SERVICE, "production", "api-service", "ClusterIP", "2d"),
    (ResourceKind.CONFIG_MAP, "production", "app-config", "ConfigMap", "2d"),
    (ResourceKind.SECRET, "production", "api-tls", "kubernetes.io/tls", "30d"),
    (ResourceKind.NODE, "", "kind-control-plane", "Ready", "7d"),
    (ResourceKind.NAMESPACE, "", "production", "Active", "30d"),
    (ResourceKind.NAMESPACE, "", "staging", "Active", "10d"),
)


def demo_items(
    context: str = "", kinds: tuple[ResourceKind, ...] | None = None
) -> list[Item]:
    """Build the demo items, optionally limited to ``kinds``."""
    return [
        Item(kind=kind, namespace=namespace, name=name, status=status, age=age, context=context)
        for kind, namespace, name, status, age in _DEMO_ROWS
        if kinds is None or kind in kinds
    ]


__all__ = ["demo_items"]
