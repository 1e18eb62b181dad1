"""Parsers for cluster objects."""

from kubefuzz.controllers.cluster.parsers.status_parser import (
    StatusParser,
    get_extractor,
    register_extractor,
    resource_age,
)

__all__ = ["StatusParser", "get_extractor", "register_extractor", "resource_age"]
