"""Item model: one observed cluster object."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from kubefuzz.constants.defaults import DELETED_STATUS, UNKNOWN_AGE
from kubefuzz.constants.enums import ResourceKind
from kubefuzz.constants.limits import NAME_DISPLAY_MAX_CHARS
from kubefuzz.models.core.status_health import StatusHealth

ItemKey = tuple[str, ResourceKind, str, str]

# Palette for per-context prefixes in multi-context mode.
_CONTEXT_PALETTE = (
    "cyan",
    "magenta",
    "yellow",
    "bright_green",
    "bright_blue",
    "bright_red",
    "bright_cyan",
    "bright_magenta",
)


def truncate_name(name: str, max_chars: int = NAME_DISPLAY_MAX_CHARS) -> str:
    """Truncate ``name`` to ``max_chars`` characters, appending an ellipsis."""
    if len(name) <= max_chars:
        return name
    return f"{name[:max_chars]}…"


def context_color(context: str) -> str:
    """Pick a stable color for a context name (same name, same color)."""
    return _CONTEXT_PALETTE[sum(context.encode("utf-8")) % len(_CONTEXT_PALETTE)]


class Item(BaseModel):
    """One cluster object plus the context it was observed in.

    Items are immutable. A later event for the same identity produces a new
    Item that replaces the earlier one wholesale.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    namespace: str = ""
    name: str = Field(min_length=1)
    status: str
    age: str = UNKNOWN_AGE
    context: str = ""

    @property
    def key(self) -> ItemKey:
        """Identity: (context, kind, namespace, name)."""
        return (self.context, self.kind, self.namespace, self.name)

    @property
    def health(self) -> StatusHealth:
        return StatusHealth.classify(self.status)

    @property
    def status_color(self) -> str:
        return self.health.color()

    @property
    def is_deleted(self) -> bool:
        return self.status == DELETED_STATUS

    def sort_key(self) -> tuple[int, str, str, str, str]:
        """Health-then-name ordering key; remaining fields only break ties."""
        return (
            self.health.priority(),
            self.name,
            self.namespace,
            self.kind.alias,
            self.context,
        )

    def with_status(self, status: str) -> Item:
        return self.model_copy(update={"status": status})

    def output_str(self) -> str:
        """Machine-parseable identifier, e.g. ``prod:pod/default/nginx``."""
        if self.namespace:
            location = f"{self.kind.alias}/{self.namespace}/{self.name}"
        else:
            location = f"{self.kind.alias}/{self.name}"
        return f"{self.context}:{location}" if self.context else location

    def search_text(self) -> str:
        """Plain text the selection UI filters on."""
        parts = [self.kind.alias]
        location = ""
        if self.context:
            location += f"{self.context}/"
        if self.namespace:
            location += f"{self.namespace}/"
        location += self.name
        parts.extend([location, self.status, self.age])
        return " ".join(parts)


__all__ = ["Item", "ItemKey", "context_color", "truncate_name"]
