"""Status parser - turns raw Kubernetes objects into display status strings.

Each resource kind registers one extractor. The watcher looks its extractor up
once and calls it for every object of that kind, so adding a kind means
registering a function here rather than editing a shared switch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from datetime import datetime, timezone
from typing import Any

from kubefuzz.constants.defaults import DELETED_STATUS, UNKNOWN_AGE, UNKNOWN_STATUS
from kubefuzz.constants.enums import ResourceKind
from kubefuzz.models.core.item import Item

logger = logging.getLogger(__name__)

StatusExtractor = Callable[[dict[str, Any]], str]

_EXTRACTORS: dict[ResourceKind, StatusExtractor] = {}


def register_extractor(
    kind: ResourceKind,
) -> Callable[[StatusExtractor], StatusExtractor]:
    """Decorator registering ``func`` as the status extractor for ``kind``."""

    def decorator(func: StatusExtractor) -> StatusExtractor:
        _EXTRACTORS[kind] = func
        return func

    return decorator


def get_extractor(kind: ResourceKind) -> StatusExtractor:
    """Return the extractor for ``kind``; unregistered kinds report Unknown."""
    return _EXTRACTORS.get(kind, _unknown_status)


def _unknown_status(_obj: dict[str, Any]) -> str:
    return UNKNOWN_STATUS


def _section(obj: dict[str, Any], key: str) -> dict[str, Any]:
    value = obj.get(key)
    return value if isinstance(value, dict) else {}


def _as_int(value: Any, default: int = 0) -> int:
    with suppress(TypeError, ValueError):
        return int(value)
    return default


def _completed(container: dict[str, Any]) -> bool:
    terminated = _section(container, "state").get("terminated")
    return isinstance(terminated, dict) and _as_int(terminated.get("exitCode")) == 0


# =============================================================================
# Workloads
# =============================================================================


@register_extractor(ResourceKind.POD)
def pod_status(pod: dict[str, Any]) -> str:
    """Mimic the STATUS column of ``kubectl get pods``."""
    if _section(pod, "metadata").get("deletionTimestamp"):
        return "Terminating"
    status = pod.get("status")
    if not isinstance(status, dict):
        return UNKNOWN_STATUS

    for container in status.get("containerStatuses") or []:
        state = _section(container, "state")
        reason = _section(state, "waiting").get("reason")
        # PodInitializing means the main container waits on init containers;
        # the init block below reports their progress instead.
        if reason and reason not in ("ContainerCreating", "PodInitializing"):
            return str(reason)
        terminated = state.get("terminated")
        if isinstance(terminated, dict) and _as_int(terminated.get("exitCode")) != 0:
            return str(terminated.get("reason") or "Error")

    init_statuses = status.get("initContainerStatuses") or []
    for container in init_statuses:
        reason = _section(_section(container, "state"), "waiting").get("reason")
        if reason:
            return f"Init:{reason}"
    if init_statuses:
        done = sum(1 for container in init_statuses if _completed(container))
        if done < len(init_statuses):
            return f"Init:{done}/{len(init_statuses)}"

    return str(status.get("phase") or UNKNOWN_STATUS)


@register_extractor(ResourceKind.DEPLOYMENT)
def deployment_status(deployment: dict[str, Any]) -> str:
    ready = _as_int(_section(deployment, "status").get("readyReplicas"))
    desired = _as_int(_section(deployment, "spec").get("replicas"), default=1)
    return f"{ready}/{desired}"


@register_extractor(ResourceKind.STATEFUL_SET)
def statefulset_status(statefulset: dict[str, Any]) -> str:
    status = _section(statefulset, "status")
    return f"{_as_int(status.get('readyReplicas'))}/{_as_int(status.get('replicas'))}"


@register_extractor(ResourceKind.DAEMON_SET)
def daemonset_status(daemonset: dict[str, Any]) -> str:
    status = _section(daemonset, "status")
    ready = _as_int(status.get("numberReady"))
    desired = _as_int(status.get("desiredNumberScheduled"))
    return f"{ready}/{desired}"


@register_extractor(ResourceKind.JOB)
def job_status(job: dict[str, Any]) -> str:
    status = _section(job, "status")
    if status.get("completionTime"):
        return "Complete"
    failed = _as_int(status.get("failed"))
    if failed > 0:
        return f"Failed({failed})"
    active = _as_int(status.get("active"))
    if active > 0:
        return f"Active({active})"
    return UNKNOWN_STATUS


@register_extractor(ResourceKind.CRON_JOB)
def cronjob_status(cronjob: dict[str, Any]) -> str:
    active = _section(cronjob, "status").get("active")
    count = len(active) if isinstance(active, list) else 0
    return f"Active({count})" if count > 0 else "Scheduled"


# =============================================================================
# Networking, config and storage
# =============================================================================


@register_extractor(ResourceKind.SERVICE)
def service_status(service: dict[str, Any]) -> str:
    return str(_section(service, "spec").get("type") or "ClusterIP")


@register_extractor(ResourceKind.INGRESS)
def ingress_status(ingress: dict[str, Any]) -> str:
    load_balancer = _section(_section(ingress, "status"), "loadBalancer")
    entries = load_balancer.get("ingress")
    if isinstance(entries, list) and entries and isinstance(entries[0], dict):
        first = entries[0]
        address = first.get("ip") or first.get("hostname")
        if address:
            return str(address)
    return "<pending>"


@register_extractor(ResourceKind.CONFIG_MAP)
def configmap_status(_configmap: dict[str, Any]) -> str:
    return "ConfigMap"


@register_extractor(ResourceKind.SECRET)
def secret_status(secret: dict[str, Any]) -> str:
    return str(secret.get("type") or "Opaque")


@register_extractor(ResourceKind.PERSISTENT_VOLUME_CLAIM)
def pvc_status(pvc: dict[str, Any]) -> str:
    return str(_section(pvc, "status").get("phase") or UNKNOWN_STATUS)


# =============================================================================
# Cluster-scoped
# =============================================================================


@register_extractor(ResourceKind.NODE)
def node_status(node: dict[str, Any]) -> str:
    for condition in _section(node, "status").get("conditions") or []:
        if isinstance(condition, dict) and condition.get("type") == "Ready":
            return "Ready" if condition.get("status") == "True" else "NotReady"
    return UNKNOWN_STATUS


@register_extractor(ResourceKind.NAMESPACE)
def namespace_status(namespace: dict[str, Any]) -> str:
    return str(_section(namespace, "status").get("phase") or "Active")


# =============================================================================
# Age and item construction
# =============================================================================


def resource_age(metadata: dict[str, Any], now: datetime | None = None) -> str:
    """Format the age of an object as ``3d``, ``5h`` or ``12m``; ``?`` if unknown."""
    raw = metadata.get("creationTimestamp")
    if not isinstance(raw, str) or not raw:
        return UNKNOWN_AGE
    try:
        created = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return UNKNOWN_AGE
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)

    elapsed = (now or datetime.now(timezone.utc)) - created
    total_minutes = max(0, int(elapsed.total_seconds() // 60))
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    if days > 0:
        return f"{days}d"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


class StatusParser:
    """Builds Items for one resource kind using its registered extractor."""

    def __init__(self, kind: ResourceKind, context: str = "") -> None:
        self.kind = kind
        self.context = context
        self._extract = get_extractor(kind)

    def extract_status(self, obj: dict[str, Any]) -> str:
        """Run the extractor; malformed objects degrade to ``Unknown``."""
        try:
            return self._extract(obj) or UNKNOWN_STATUS
        except Exception:
            logger.debug(
                "Status extraction failed for %s object", self.kind.alias, exc_info=True
            )
            return UNKNOWN_STATUS

    def parse_item(self, obj: dict[str, Any], *, deleted: bool = False) -> Item | None:
        """Build an Item from a raw object, or None if it has no name."""
        metadata = _section(obj, "metadata")
        name = metadata.get("name")
        if not isinstance(name, str) or not name:
            logger.debug("Skipping nameless %s object", self.kind.alias)
            return None
        namespace = metadata.get("namespace")
        return Item(
            kind=self.kind,
            namespace="" if self.kind.cluster_scoped else str(namespace or ""),
            name=name,
            status=DELETED_STATUS if deleted else self.extract_status(obj),
            age=resource_age(metadata),
            context=self.context,
        )


__all__ = [
    "StatusExtractor",
    "StatusParser",
    "get_extractor",
    "register_extractor",
    "resource_age",
]
