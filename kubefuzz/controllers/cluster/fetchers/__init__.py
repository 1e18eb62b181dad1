"""Fetchers for cluster objects."""

from kubefuzz.controllers.cluster.fetchers.resource_fetcher import (
    JsonStreamDecoder,
    ResourceFetcher,
    WatchStreamError,
    terminate_process,
)

__all__ = [
    "JsonStreamDecoder",
    "ResourceFetcher",
    "WatchStreamError",
    "terminate_process",
]
