"""Controllers module for KubeFuzz.

This module provides the cluster data sources and the watch engine that
keeps the live item view current.
"""

from __future__ import annotations

# Base classes
from kubefuzz.controllers.base import BaseController, Listing, WatchEvent, WorkerResult

# Cluster domain
from kubefuzz.controllers.cluster import (
    Aggregator,
    ClusterController,
    ContextManager,
    KubectlError,
    MergedView,
    WatchRuntime,
)

__all__ = [
    "Aggregator",
    "BaseController",
    "ClusterController",
    "ContextManager",
    "KubectlError",
    "Listing",
    "MergedView",
    "WatchEvent",
    "WatchRuntime",
    "WorkerResult",
]
