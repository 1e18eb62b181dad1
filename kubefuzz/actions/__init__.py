"""Operator actions: argv construction, input validation and dispatch."""

from kubefuzz.actions.commands import (
    CommandBuilder,
    UnsafeNameError,
    ensure_safe_items,
    ensure_safe_name,
)
from kubefuzz.actions.dispatcher import (
    PAUSE_AFTER,
    ActionDispatcher,
    ActionResult,
    Selection,
    SubprocessRunner,
)
from kubefuzz.actions.prompts import InvalidPortError, confirm_delete, parse_port

__all__ = [
    "PAUSE_AFTER",
    "ActionDispatcher",
    "ActionResult",
    "CommandBuilder",
    "InvalidPortError",
    "Selection",
    "SubprocessRunner",
    "UnsafeNameError",
    "confirm_delete",
    "ensure_safe_items",
    "ensure_safe_name",
    "parse_port",
]
