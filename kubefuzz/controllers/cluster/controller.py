"""Cluster controller - the kubectl-backed client handle of one context.

Short commands run through ``subprocess.run`` in a worker thread; watch
streams are long-lived ``asyncio`` subprocesses started in their own session
so a terminal interrupt aimed at an interactive action does not reach them.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import AsyncIterator

from kubefuzz.constants.defaults import KUBECTL_BINARY
from kubefuzz.constants.enums import ResourceKind
from kubefuzz.constants.timeouts import (
    KUBECTL_COMMAND_TIMEOUT,
    KUBECTL_CONFIG_TIMEOUT,
)
from kubefuzz.controllers.base import BaseController, Listing, WatchEvent
from kubefuzz.controllers.cluster.fetchers import ResourceFetcher

logger = logging.getLogger(__name__)


class KubectlError(RuntimeError):
    """Raised when a kubectl invocation exits non-zero or cannot be started."""


def kubectl_base_command(
    context: str | None = None, kubeconfig: str | None = None
) -> list[str]:
    """Return the kubectl argv prefix carrying kubeconfig and context flags."""
    cmd = [KUBECTL_BINARY]
    if kubeconfig:
        cmd.extend(["--kubeconfig", kubeconfig])
    if context:
        cmd.extend(["--context", context])
    return cmd


class ClusterController(BaseController):
    """List/watch access to a single kubeconfig context through kubectl."""

    @staticmethod
    def resolve_current_context(
        kubeconfig: str | None = None,
        timeout_seconds: int = KUBECTL_CONFIG_TIMEOUT,
    ) -> str | None:
        """Resolve active kubectl context name from local kubeconfig."""
        cmd = [*kubectl_base_command(kubeconfig=kubeconfig), "config", "current-context"]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=max(1, timeout_seconds),
            )
        except (OSError, subprocess.TimeoutExpired):
            return None

        if result.returncode != 0:
            return None
        resolved = (result.stdout or "").strip()
        return resolved or None

    @staticmethod
    def list_contexts(
        kubeconfig: str | None = None,
        timeout_seconds: int = KUBECTL_CONFIG_TIMEOUT,
    ) -> list[str]:
        """Return the sorted context names known to the kubeconfig.

        Returns an empty list when kubectl is missing or fails.
        """
        cmd = [
            *kubectl_base_command(kubeconfig=kubeconfig),
            "config",
            "get-contexts",
            "-o",
            "name",
        ]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=max(1, timeout_seconds),
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("Could not list kubeconfig contexts: %s", exc)
            return []

        if result.returncode != 0:
            logger.warning(
                "kubectl config get-contexts failed: %s", (result.stderr or "").strip()
            )
            return []
        names = {line.strip() for line in (result.stdout or "").splitlines()}
        return sorted(name for name in names if name)

    def __init__(self, context: str | None = None, kubeconfig: str | None = None):
        """Initialize the cluster controller.

        Args:
            context: Optional Kubernetes context name.
            kubeconfig: Optional path to a kubeconfig file.
        """
        super().__init__()
        self.context = context
        self.kubeconfig = kubeconfig
        self._resource_fetcher = ResourceFetcher(self.run_kubectl, self.open_stream)

    def __repr__(self) -> str:
        return f"ClusterController(context={self.context!r})"

    def base_command(self) -> list[str]:
        return kubectl_base_command(self.context, self.kubeconfig)

    def _run_kubectl_sync(
        self,
        args: tuple[str, ...],
        timeout: int = KUBECTL_COMMAND_TIMEOUT,
    ) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        cmd = [*self.base_command(), *args]
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=timeout
            )
        except OSError as exc:
            raise KubectlError(f"Could not run {KUBECTL_BINARY}: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise KubectlError(f"kubectl timed out after {timeout}s") from exc
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise KubectlError(stderr or "kubectl command failed")
        return result.stdout

    async def run_kubectl(self, args: tuple[str, ...]) -> str:
        return await asyncio.to_thread(self._run_kubectl_sync, args)

    async def open_stream(self, args: tuple[str, ...]) -> asyncio.subprocess.Process:
        """Spawn a long-lived kubectl process with piped stdout/stderr."""
        cmd = [*self.base_command(), *args]
        logger.debug("Opening watch stream: %s", " ".join(cmd))
        try:
            return await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as exc:
            raise KubectlError(f"Could not run {KUBECTL_BINARY}: {exc}") from exc

    @staticmethod
    def _summarize_connection_error(error: BaseException) -> str:
        """Extract a concise, user-facing connection error from kubectl output."""
        raw_message = str(error).strip()
        if not raw_message:
            return "Cluster connection check failed"

        lines = [line.strip() for line in raw_message.splitlines() if line.strip()]
        if not lines:
            return "Cluster connection check failed"

        preferred_tokens = (
            "unable to connect to the server",
            "you must be logged in",
            "context deadline exceeded",
            "timed out",
            "certificate",
            "no such host",
            "forbidden",
            "unauthorized",
            "does not exist",
        )

        selected_line = lines[-1]
        for line in reversed(lines):
            lower_line = line.lower()
            if line.startswith("error:") or any(
                token in lower_line for token in preferred_tokens
            ):
                selected_line = line
                break

        cleaned = selected_line.removeprefix("error:").strip()
        if len(cleaned) > 160:
            return f"{cleaned[:157].rstrip()}..."
        return cleaned or "Cluster connection check failed"

    async def list_objects(
        self, kind: ResourceKind, namespace: str | None = None
    ) -> Listing:
        return await self._resource_fetcher.list_objects(kind, namespace)

    def watch_objects(
        self,
        kind: ResourceKind,
        namespace: str | None = None,
        resource_version: str | None = None,
    ) -> AsyncIterator[WatchEvent]:
        return self._resource_fetcher.watch_objects(kind, namespace, resource_version)


__all__ = ["ClusterController", "KubectlError", "kubectl_base_command"]
