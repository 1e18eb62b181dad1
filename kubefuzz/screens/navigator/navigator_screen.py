"""Navigator screen - the selection UI over the aggregated live view.

The table is rebuilt from the published snapshot on a timer; nothing here
ever waits on a watcher. Printable keys edit a substring filter, trigger
keys hand the selection to the app for dispatch.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import time
from collections import Counter
from typing import TYPE_CHECKING, cast

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Static

from kubefuzz.actions import Selection, UnsafeNameError
from kubefuzz.constants.enums import PreviewMode, TriggerKey
from kubefuzz.constants.limits import PREVIEW_MAX_CHARS
from kubefuzz.constants.timeouts import PREVIEW_COMMAND_TIMEOUT
from kubefuzz.controllers.base import WorkerResult
from kubefuzz.controllers.cluster import Aggregator, MergedView
from kubefuzz.keyboard.navigation import NAVIGATOR_SCREEN_BINDINGS
from kubefuzz.models.core.item import Item, ItemKey, context_color, truncate_name
from kubefuzz.models.core.status_health import StatusHealth
from kubefuzz.screens.navigator.config import (
    CONTEXT_COLUMN,
    FILTER_ID,
    FILTER_PROMPT,
    HEADER_ID,
    ITEM_TABLE_COLUMNS,
    PREVIEW_ID,
    PREVIEW_TITLE_ID,
    SELECT_COLUMN,
    SELECTED_MARKER,
    TABLE_ID,
)

if TYPE_CHECKING:
    from kubefuzz.app import NavigatorApp

logger = logging.getLogger(__name__)


def _row_key(item: Item) -> str:
    context, kind, namespace, name = item.key
    return f"{context}\x1f{kind.alias}\x1f{namespace}\x1f{name}"


class NavigatorScreen(Screen[None]):
    """Live, filterable, multi-select list of cluster objects."""

    BINDINGS = NAVIGATOR_SCREEN_BINDINGS

    DEFAULT_CSS = """
    #nav-header {
        height: 1;
        padding: 0 1;
        background: $panel;
    }

    #nav-filter {
        height: 1;
        padding: 0 1;
    }

    #nav-body {
        height: 1fr;
    }

    #nav-table {
        width: 3fr;
    }

    #nav-preview-pane {
        width: 2fr;
        border-left: solid $panel-lighten-2;
    }

    #nav-preview-title {
        height: 1;
        padding: 0 1;
        text-style: bold;
    }

    #nav-preview {
        padding: 0 1;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.query_text = ""
        self.selected: set[ItemKey] = set()
        self._visible: list[Item] = []
        self._rendered_state: tuple[object, ...] | None = None
        self._columns_multi: bool | None = None
        self._header_text = ""
        self._preview_target: tuple[ItemKey, PreviewMode] | None = None

    @property
    def navigator(self) -> NavigatorApp:
        return cast("NavigatorApp", self.app)

    def compose(self) -> ComposeResult:
        yield Static("", id=HEADER_ID)
        yield Static(FILTER_PROMPT, id=FILTER_ID, markup=False)
        with Horizontal(id="nav-body"):
            yield DataTable(id=TABLE_ID, cursor_type="row", zebra_stripes=False)
            with Vertical(id="nav-preview-pane"):
                yield Static("", id=PREVIEW_TITLE_ID, markup=False)
                with VerticalScroll():
                    yield Static("", id=PREVIEW_ID, markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(f"#{TABLE_ID}", DataTable).focus()
        self.set_interval(self.navigator.settings.refresh_interval, self.refresh_view)
        self.refresh_view()

    # View ----------------------------------------------------------------------

    def refresh_view(self, force: bool = False) -> None:
        """Re-render when the snapshot, filter or selection changed."""
        view = self.navigator.current_view()
        version, items = view.versioned_snapshot() if view is not None else (0, ())
        multi = self.navigator.context_manager.is_multi_context
        self._update_header(view)

        state = (id(view), version, self.query_text, frozenset(self.selected), multi)
        if not force and state == self._rendered_state:
            return
        self._rendered_state = state
        self._rebuild_table(items, multi)
        self._schedule_preview()

    def _update_header(self, view: Aggregator | MergedView | None) -> None:
        nav = self.navigator
        counts = view.counts_by_health() if view is not None else Counter()

        header = Text()
        header.append(f"ctx: {nav.context_label}", style="bold")
        header.append(f"  ns: {nav.settings.namespace or 'all'}")
        header.append(f"  kind: {nav.settings.kind_label}")
        header.append(f"  preview: {nav.preview_state.mode.label}")
        header.append("  ")
        for health in (StatusHealth.CRITICAL, StatusHealth.WARNING, StatusHealth.HEALTHY):
            header.append(f"● {counts[health]} ", style=health.color())
        if nav.settings.read_only:
            header.append(" READ-ONLY", style="bold red")

        if header.plain != self._header_text:
            self._header_text = header.plain
            self.query_one(f"#{HEADER_ID}", Static).update(header)

    def _columns(self, multi: bool) -> list[tuple[str, int]]:
        columns = [SELECT_COLUMN, ITEM_TABLE_COLUMNS[0]]
        if multi:
            columns.append(CONTEXT_COLUMN)
        columns.extend(ITEM_TABLE_COLUMNS[1:])
        return columns

    def _cells(self, item: Item, multi: bool) -> list[Text]:
        cells = [
            Text(SELECTED_MARKER if item.key in self.selected else " ", style="bold cyan"),
            Text(item.kind.alias, style=item.kind.color),
        ]
        if multi:
            cells.append(Text(item.context, style=context_color(item.context)))
        cells.extend(
            [
                Text(item.namespace or "-", style="" if item.namespace else "dim"),
                Text(truncate_name(item.name)),
                Text(item.status, style=item.status_color),
                Text(item.age, style="dim"),
            ]
        )
        return cells

    def _rebuild_table(self, items: tuple[Item, ...], multi: bool) -> None:
        table = self.query_one(f"#{TABLE_ID}", DataTable)
        cursor_item = self.cursor_item()

        if multi != self._columns_multi:
            table.clear(columns=True)
            for label, width in self._columns(multi):
                table.add_column(label, width=width)
            self._columns_multi = multi
        else:
            table.clear()

        live_keys = {item.key for item in items}
        self.selected &= live_keys
        needle = self.query_text.lower()
        self._visible = [
            item for item in items if not needle or needle in item.search_text().lower()
        ]
        for item in self._visible:
            table.add_row(*self._cells(item, multi), key=_row_key(item))

        if cursor_item is not None:
            for index, item in enumerate(self._visible):
                if item.key == cursor_item.key:
                    table.move_cursor(row=index, animate=False)
                    break

    def cursor_item(self) -> Item | None:
        table = self.query_one(f"#{TABLE_ID}", DataTable)
        row = table.cursor_row
        if 0 <= row < len(self._visible):
            return self._visible[row]
        return None

    def selected_items(self) -> list[Item]:
        """Selected items in view order; the cursor item when nothing is selected."""
        if self.selected:
            view = self.navigator.current_view()
            items = view.snapshot() if view is not None else ()
            return [item for item in items if item.key in self.selected]
        cursor = self.cursor_item()
        return [cursor] if cursor is not None else []

    def _update_filter(self) -> None:
        self.query_one(f"#{FILTER_ID}", Static).update(f"{FILTER_PROMPT}{self.query_text}")
        self.refresh_view()

    # Preview -------------------------------------------------------------------

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        event.stop()
        self._schedule_preview()

    def _schedule_preview(self, force: bool = False) -> None:
        item = self.cursor_item()
        title = self.query_one(f"#{PREVIEW_TITLE_ID}", Static)
        if item is None:
            self._preview_target = None
            title.update("")
            self.query_one(f"#{PREVIEW_ID}", Static).update("")
            return
        mode = self.navigator.preview_state.mode
        target = (item.key, mode)
        if not force and target == self._preview_target:
            return
        self._preview_target = target
        title.update(f"{mode.label}: {item.output_str()}")
        self.run_worker(self._load_preview(item, mode), exclusive=True, group="preview")

    async def _fetch_preview(self, item: Item, mode: PreviewMode) -> WorkerResult:
        dispatcher = self.navigator.dispatcher
        started = time.monotonic()
        try:
            argv = dispatcher.commands.preview(item, mode)
            completed = await asyncio.to_thread(
                dispatcher.runner.capture, argv, PREVIEW_COMMAND_TIMEOUT
            )
        except UnsafeNameError as exc:
            return WorkerResult(success=False, error=str(exc))
        except (OSError, subprocess.TimeoutExpired) as exc:
            return WorkerResult(success=False, error=f"kubectl: {exc}")
        duration_ms = (time.monotonic() - started) * 1000
        if completed.returncode != 0:
            return WorkerResult(
                success=False,
                error=completed.stderr.strip() or f"kubectl exited with {completed.returncode}",
                duration_ms=duration_ms,
            )
        return WorkerResult(success=True, data=completed.stdout, duration_ms=duration_ms)

    async def _load_preview(self, item: Item, mode: PreviewMode) -> None:
        result = await self._fetch_preview(item, mode)
        if self._preview_target != (item.key, mode):
            return
        if result.success:
            body = Text(str(result.data or "")[:PREVIEW_MAX_CHARS])
        else:
            logger.debug("Preview of %s failed: %s", item.output_str(), result.error)
            body = Text(result.error or "preview unavailable", style="yellow")
        self.query_one(f"#{PREVIEW_ID}", Static).update(body)

    # Input ---------------------------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        if event.is_printable and event.character and event.character != " ":
            event.stop()
            event.prevent_default()
            self.query_text += event.character
            self._update_filter()

    def action_filter_backspace(self) -> None:
        if self.query_text:
            self.query_text = self.query_text[:-1]
            self._update_filter()

    def action_clear_or_quit(self) -> None:
        if self.query_text:
            self.query_text = ""
            self._update_filter()
        else:
            self.app.exit()

    def action_toggle_select(self) -> None:
        item = self.cursor_item()
        if item is None:
            return
        if item.key in self.selected:
            self.selected.discard(item.key)
        else:
            self.selected.add(item.key)
        table = self.query_one(f"#{TABLE_ID}", DataTable)
        row = table.cursor_row
        self.refresh_view()
        table.move_cursor(row=min(row + 1, len(self._visible) - 1), animate=False)

    def action_trigger(self, trigger_name: str) -> None:
        """End the selection cycle with ``trigger_name`` and dispatch it."""
        trigger = TriggerKey[trigger_name]
        selection = Selection(items=tuple(self.selected_items()), trigger=trigger)
        self.navigator.dispatch_selection(selection)
        if trigger is TriggerKey.PREVIEW_CYCLE:
            self._schedule_preview(force=True)
        elif trigger is not TriggerKey.SWITCH_CONTEXT:
            self.selected.clear()
        self.refresh_view(force=True)
