"""Cluster controller package - kubectl access, parsing and watching."""

from kubefuzz.controllers.cluster.aggregator import Aggregator, MergedView
from kubefuzz.controllers.cluster.context_manager import ContextManager, WatchContext
from kubefuzz.controllers.cluster.controller import (
    ClusterController,
    KubectlError,
    kubectl_base_command,
)
from kubefuzz.controllers.cluster.demo import demo_items
from kubefuzz.controllers.cluster.fetchers import ResourceFetcher, WatchStreamError
from kubefuzz.controllers.cluster.parsers import StatusParser
from kubefuzz.controllers.cluster.runtime import WatchRuntime
from kubefuzz.controllers.cluster.watcher import ExponentialBackoff, ResourceWatcher

__all__ = [
    "Aggregator",
    "ClusterController",
    "ContextManager",
    "ExponentialBackoff",
    "KubectlError",
    "MergedView",
    "ResourceFetcher",
    "ResourceWatcher",
    "StatusParser",
    "WatchContext",
    "WatchRuntime",
    "WatchStreamError",
    "demo_items",
    "kubectl_base_command",
]
