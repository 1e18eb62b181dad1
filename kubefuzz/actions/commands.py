"""kubectl argument vectors for operator actions and the preview pane.

Resource names come from the API server and are treated as untrusted: a
name starting with ``-`` is rejected outright, and every builder puts all
flags first and ``--`` before the first name. ``exec`` is the one command
where kubectl reserves ``--`` for the remote command, so the (validated) pod
name precedes it there.
"""

from __future__ import annotations

from collections.abc import Iterable

from kubefuzz.constants.defaults import KUBECTL_BINARY
from kubefuzz.constants.enums import PreviewMode, ResourceKind
from kubefuzz.constants.limits import LOG_TAIL_LINES, PREVIEW_LOG_TAIL_LINES
from kubefuzz.models.core.item import Item

Argv = list[str]


class UnsafeNameError(ValueError):
    """Raised for a resource name kubectl could mistake for a flag."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Refusing unsafe resource name {name!r}")
        self.name = name


def ensure_safe_name(name: str) -> str:
    if not name or name.startswith("-"):
        raise UnsafeNameError(name)
    return name


def ensure_safe_items(items: Iterable[Item]) -> None:
    """Validate every name (and namespace) before any argv is built."""
    for item in items:
        ensure_safe_name(item.name)
        if item.namespace:
            ensure_safe_name(item.namespace)


class CommandBuilder:
    """Builds kubectl argv lists scoped to an item's cluster and namespace.

    ``context`` is used for items without their own context label (single
    context mode); labelled items always target the context they came from.
    """

    def __init__(self, context: str | None = None, kubeconfig: str | None = None) -> None:
        self.context = context
        self.kubeconfig = kubeconfig

    def _base(self, item: Item) -> Argv:
        argv = [KUBECTL_BINARY]
        if self.kubeconfig:
            argv.extend(["--kubeconfig", self.kubeconfig])
        context = item.context or self.context
        if context:
            argv.extend(["--context", context])
        return argv

    @staticmethod
    def _namespace(item: Item) -> Argv:
        return ["-n", item.namespace] if item.namespace else []

    @staticmethod
    def _target(item: Item) -> str:
        return f"{item.kind.alias}/{ensure_safe_name(item.name)}"

    def describe(self, item: Item) -> Argv:
        return [
            *self._base(item),
            "describe",
            *self._namespace(item),
            item.kind.alias,
            "--",
            ensure_safe_name(item.name),
        ]

    def yaml(self, item: Item) -> Argv:
        return [
            *self._base(item),
            "get",
            *self._namespace(item),
            "-o",
            "yaml",
            item.kind.alias,
            "--",
            ensure_safe_name(item.name),
        ]

    def delete(self, item: Item) -> Argv:
        return [
            *self._base(item),
            "delete",
            *self._namespace(item),
            item.kind.alias,
            "--",
            ensure_safe_name(item.name),
        ]

    def logs(self, item: Item, tail: int = LOG_TAIL_LINES) -> Argv:
        return [
            *self._base(item),
            "logs",
            *self._namespace(item),
            f"--tail={tail}",
            "--",
            ensure_safe_name(item.name),
        ]

    def exec_shell(self, item: Item, shell: str) -> Argv:
        return [
            *self._base(item),
            "exec",
            "-it",
            *self._namespace(item),
            ensure_safe_name(item.name),
            "--",
            shell,
        ]

    def port_forward(self, item: Item, local_port: int, remote_port: int) -> Argv:
        return [
            *self._base(item),
            "port-forward",
            *self._namespace(item),
            "--",
            self._target(item),
            f"{local_port}:{remote_port}",
        ]

    def rollout_restart(self, item: Item) -> Argv:
        return [
            *self._base(item),
            "rollout",
            "restart",
            *self._namespace(item),
            "--",
            self._target(item),
        ]

    def rollout_status(self, item: Item) -> Argv:
        return [
            *self._base(item),
            "rollout",
            "status",
            *self._namespace(item),
            "--",
            self._target(item),
        ]

    def preview(self, item: Item, mode: PreviewMode) -> Argv:
        """Command rendering the preview pane; logs fall back to describe for non-pods."""
        if mode is PreviewMode.YAML:
            return self.yaml(item)
        if mode is PreviewMode.LOGS and item.kind is ResourceKind.POD:
            return self.logs(item, tail=PREVIEW_LOG_TAIL_LINES)
        return self.describe(item)


__all__ = [
    "Argv",
    "CommandBuilder",
    "UnsafeNameError",
    "ensure_safe_items",
    "ensure_safe_name",
]
