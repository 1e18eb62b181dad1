"""Base controller for cluster data sources.

A controller is the client handle a watch context is bound to: it can list
the objects of a kind and open a watch stream for a kind that resumes from
the resource version the listing was taken at.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from kubefuzz.constants.enums import ResourceKind, WatchEventType

logger = logging.getLogger(__name__)


@dataclass
class WatchEvent:
    """One add/update/delete notification from a watch stream."""

    type: WatchEventType
    object: dict[str, Any] = field(default_factory=dict)


@dataclass
class Listing:
    """A full listing of one kind and the resource version it was read at."""

    objects: list[dict[str, Any]] = field(default_factory=list)
    resource_version: str | None = None


@dataclass
class WorkerResult:
    """Result wrapper for background operations."""

    success: bool
    data: Any | None = None
    error: str | None = None
    duration_ms: float = 0.0


class BaseController(ABC):
    """Base controller class for list/watch data sources.

    Subclasses provide the transport; watchers only depend on this interface.
    """

    context: str | None = None

    @abstractmethod
    async def list_objects(
        self, kind: ResourceKind, namespace: str | None = None
    ) -> Listing:
        """List every object of ``kind``, optionally scoped to ``namespace``.

        Raises on transport failure; callers retry.
        """
        ...

    @abstractmethod
    def watch_objects(
        self,
        kind: ResourceKind,
        namespace: str | None = None,
        resource_version: str | None = None,
    ) -> AsyncIterator[WatchEvent]:
        """Stream change events for ``kind`` until the stream ends or fails.

        With ``resource_version`` the stream starts right after that version,
        so no change made after the matching listing is missed.
        """
        ...
