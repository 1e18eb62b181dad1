"""Navigator screen configuration - widget IDs and column definitions."""

from __future__ import annotations

# =============================================================================
# Widget IDs
# =============================================================================

HEADER_ID = "nav-header"
FILTER_ID = "nav-filter"
TABLE_ID = "nav-table"
PREVIEW_ID = "nav-preview"
PREVIEW_TITLE_ID = "nav-preview-title"

# =============================================================================
# Table Column Definitions: list[tuple[str, int]] = [(name, width), ...]
# =============================================================================

SELECT_COLUMN: tuple[str, int] = ("", 1)
CONTEXT_COLUMN: tuple[str, int] = ("CONTEXT", 16)

ITEM_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("KIND", 7),
    ("NAMESPACE", 16),
    ("NAME", 32),
    ("STATUS", 17),
    ("AGE", 5),
]

SELECTED_MARKER = "●"
FILTER_PROMPT = "> "
