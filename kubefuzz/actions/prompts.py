"""Operator input validation for destructive and port-forward actions."""

from __future__ import annotations

from kubefuzz.constants.limits import (
    BULK_DELETE_THRESHOLD,
    PORT_MAX,
    PORT_MIN,
    PRIVILEGED_PORT_MAX,
)


class InvalidPortError(ValueError):
    """Raised for port input outside 1-65535 or not a number."""


def delete_confirmation_word(count: int) -> str:
    """The answer required to delete ``count`` items."""
    return "yes" if count > BULK_DELETE_THRESHOLD else "y"


def delete_prompt(count: int) -> str:
    noun = "resource" if count == 1 else "resources"
    word = delete_confirmation_word(count)
    if word != "y":
        return f"Delete {count} {noun}? Type '{word}' to confirm: "
    return f"Delete {count} {noun}? [y/N] "


def confirm_delete(count: int, answer: str) -> bool:
    """Up to the threshold a single ``y``/``Y`` confirms; above it only ``yes``."""
    answer = answer.strip()
    word = delete_confirmation_word(count)
    if word == "y":
        return answer in ("y", "Y")
    return answer == word


def parse_port(text: str) -> int:
    """Parse a TCP port number.

    Raises:
        InvalidPortError: If ``text`` is not an integer in 1-65535.
    """
    value = text.strip()
    if not (value.isascii() and value.isdigit()):
        raise InvalidPortError(f"Invalid port {text.strip()!r}: not a number")
    port = int(value)
    if not PORT_MIN <= port <= PORT_MAX:
        raise InvalidPortError(f"Invalid port {port}: must be {PORT_MIN}-{PORT_MAX}")
    return port


def is_privileged_port(port: int) -> bool:
    return port <= PRIVILEGED_PORT_MAX


__all__ = [
    "InvalidPortError",
    "confirm_delete",
    "delete_confirmation_word",
    "delete_prompt",
    "is_privileged_port",
    "parse_port",
]
