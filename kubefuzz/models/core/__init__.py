"""Core models: items and status health."""

from kubefuzz.models.core.item import Item, ItemKey, context_color, truncate_name
from kubefuzz.models.core.status_health import StatusHealth

__all__ = [
    "Item",
    "ItemKey",
    "StatusHealth",
    "context_color",
    "truncate_name",
]
