"""All enum definitions for KubeFuzz.

This module consolidates the enumerations shared by the watch engine,
the action dispatcher and the selection UI.
"""

from __future__ import annotations

from enum import Enum
from urllib.parse import quote

# =============================================================================
# Resource kinds
# =============================================================================


class ResourceKind(Enum):
    """Kubernetes resource kinds KubeFuzz can watch.

    Each member carries its short alias (shown in the list and used as the
    kubectl type argument), a display color, the fully-qualified kubectl
    resource name used for list/watch and whether the kind is cluster-scoped.
    New kinds are added as new members; consumers look attributes up on the
    member rather than branching on it.
    """

    POD = ("pod", "green", "pods", False)
    SERVICE = ("svc", "blue", "services", False)
    DEPLOYMENT = ("deploy", "yellow", "deployments.apps", False)
    STATEFUL_SET = ("sts", "yellow", "statefulsets.apps", False)
    DAEMON_SET = ("ds", "yellow", "daemonsets.apps", False)
    CONFIG_MAP = ("cm", "magenta", "configmaps", False)
    SECRET = ("secret", "magenta", "secrets", False)
    INGRESS = ("ing", "cyan", "ingresses.networking.k8s.io", False)
    NODE = ("node", "white", "nodes", True)
    NAMESPACE = ("ns", "white", "namespaces", True)
    PERSISTENT_VOLUME_CLAIM = ("pvc", "bright_magenta", "persistentvolumeclaims", False)
    JOB = ("job", "bright_blue", "jobs.batch", False)
    CRON_JOB = ("cronjob", "bright_blue", "cronjobs.batch", False)

    def __init__(
        self,
        alias: str,
        color: str,
        resource: str,
        cluster_scoped: bool,
    ) -> None:
        self.alias = alias
        self.color = color
        self.resource = resource
        self.cluster_scoped = cluster_scoped

    def __str__(self) -> str:
        return self.alias

    def api_path(self, namespace: str | None = None) -> str:
        """REST collection path, e.g. ``/apis/apps/v1/namespaces/web/deployments``."""
        plural, _, group = self.resource.partition(".")
        root = f"/apis/{group}/v1" if group else "/api/v1"
        if namespace and not self.cluster_scoped:
            return f"{root}/namespaces/{quote(namespace, safe='')}/{plural}"
        return f"{root}/{plural}"

    @classmethod
    def from_alias(cls, value: str | None) -> ResourceKind | None:
        """Resolve a user-supplied alias (``po``, ``deployments``...) to a kind.

        Matching is case-insensitive. Returns None for unknown aliases.
        """
        if not value:
            return None
        return _KIND_ALIASES.get(value.strip().lower())


_KIND_ALIASES: dict[str, ResourceKind] = {
    "po": ResourceKind.POD,
    "pod": ResourceKind.POD,
    "pods": ResourceKind.POD,
    "svc": ResourceKind.SERVICE,
    "service": ResourceKind.SERVICE,
    "services": ResourceKind.SERVICE,
    "deploy": ResourceKind.DEPLOYMENT,
    "deployment": ResourceKind.DEPLOYMENT,
    "deployments": ResourceKind.DEPLOYMENT,
    "sts": ResourceKind.STATEFUL_SET,
    "statefulset": ResourceKind.STATEFUL_SET,
    "statefulsets": ResourceKind.STATEFUL_SET,
    "ds": ResourceKind.DAEMON_SET,
    "daemonset": ResourceKind.DAEMON_SET,
    "daemonsets": ResourceKind.DAEMON_SET,
    "cm": ResourceKind.CONFIG_MAP,
    "configmap": ResourceKind.CONFIG_MAP,
    "configmaps": ResourceKind.CONFIG_MAP,
    "secret": ResourceKind.SECRET,
    "secrets": ResourceKind.SECRET,
    "ing": ResourceKind.INGRESS,
    "ingress": ResourceKind.INGRESS,
    "ingresses": ResourceKind.INGRESS,
    "no": ResourceKind.NODE,
    "node": ResourceKind.NODE,
    "nodes": ResourceKind.NODE,
    "ns": ResourceKind.NAMESPACE,
    "namespace": ResourceKind.NAMESPACE,
    "namespaces": ResourceKind.NAMESPACE,
    "pvc": ResourceKind.PERSISTENT_VOLUME_CLAIM,
    "persistentvolumeclaim": ResourceKind.PERSISTENT_VOLUME_CLAIM,
    "persistentvolumeclaims": ResourceKind.PERSISTENT_VOLUME_CLAIM,
    "job": ResourceKind.JOB,
    "jobs": ResourceKind.JOB,
    "cj": ResourceKind.CRON_JOB,
    "cronjob": ResourceKind.CRON_JOB,
    "cronjobs": ResourceKind.CRON_JOB,
}

# Watch order when no kind filter is given.
ALL_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.POD,
    ResourceKind.DEPLOYMENT,
    ResourceKind.STATEFUL_SET,
    ResourceKind.DAEMON_SET,
    ResourceKind.SERVICE,
    ResourceKind.INGRESS,
    ResourceKind.JOB,
    ResourceKind.CRON_JOB,
    ResourceKind.CONFIG_MAP,
    ResourceKind.SECRET,
    ResourceKind.PERSISTENT_VOLUME_CLAIM,
    ResourceKind.NAMESPACE,
    ResourceKind.NODE,
)

RESTARTABLE_KINDS: frozenset[ResourceKind] = frozenset(
    {ResourceKind.DEPLOYMENT, ResourceKind.STATEFUL_SET, ResourceKind.DAEMON_SET}
)
PORT_FORWARD_KINDS: frozenset[ResourceKind] = frozenset(
    {ResourceKind.POD, ResourceKind.SERVICE}
)


# =============================================================================
# Watch Enums
# =============================================================================


class WatchPhase(Enum):
    """Lifecycle phases of a per-kind watcher."""

    INIT = "init"
    INIT_BUFFERING = "init_buffering"
    INIT_FLUSH = "init_flush"
    STREAMING = "streaming"
    RECONNECTING = "reconnecting"
    TERMINATED = "terminated"


class WatchEventType(Enum):
    """Event types emitted by ``kubectl get --output-watch-events``."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"
    ERROR = "ERROR"


class ContextSource(Enum):
    """Where the items of a watch context come from."""

    CLUSTER = "cluster"
    DEMO = "demo"


# =============================================================================
# Action Enums
# =============================================================================


class TriggerKey(Enum):
    """Keys that end a selection cycle, mapped to the action they trigger.

    Values are Textual key names.
    """

    DESCRIBE = "enter"
    LOGS = "ctrl+l"
    EXEC = "ctrl+e"
    DELETE = "ctrl+d"
    PORT_FORWARD = "ctrl+f"
    RESTART = "ctrl+r"
    YAML = "ctrl+y"
    PREVIEW_CYCLE = "ctrl+p"
    SWITCH_CONTEXT = "ctrl+x"

    @property
    def is_mutating(self) -> bool:
        """Return True for triggers disabled in read-only mode."""
        return self in _MUTATING_TRIGGERS


_MUTATING_TRIGGERS = frozenset(
    {
        TriggerKey.EXEC,
        TriggerKey.DELETE,
        TriggerKey.PORT_FORWARD,
        TriggerKey.RESTART,
    }
)


class PreviewMode(Enum):
    """Preview pane modes, cycled in this order."""

    DESCRIBE = 0
    YAML = 1
    LOGS = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    def next(self) -> PreviewMode:
        members = list(PreviewMode)
        return members[(members.index(self) + 1) % len(members)]


__all__ = [
    "ALL_KINDS",
    "PORT_FORWARD_KINDS",
    "RESTARTABLE_KINDS",
    "ContextSource",
    "PreviewMode",
    "ResourceKind",
    "TriggerKey",
    "WatchEventType",
    "WatchPhase",
]
