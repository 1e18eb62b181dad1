"""Modal listing kubeconfig contexts; dismisses with the chosen name."""

from __future__ import annotations

from contextlib import suppress

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from kubefuzz.keyboard.navigation import CONTEXT_PICKER_BINDINGS


class ContextPickerModal(ModalScreen[str | None]):
    """Pick a context to switch to; escape dismisses with None."""

    BINDINGS = CONTEXT_PICKER_BINDINGS

    DEFAULT_CSS = """
    ContextPickerModal {
        align: center middle;
    }

    #context-picker-shell {
        width: 60;
        max-height: 24;
        padding: 1 2;
        border: round $accent;
        background: $surface;
    }

    #context-picker-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def __init__(self, contexts: list[str], current: str | None = None) -> None:
        super().__init__()
        self.contexts = contexts
        self.current = current

    def compose(self) -> ComposeResult:
        with Vertical(id="context-picker-shell"):
            yield Static("Switch context", id="context-picker-title")
            if self.contexts:
                yield OptionList(
                    *(
                        Option(f"{name}  (current)" if name == self.current else name, id=name)
                        for name in self.contexts
                    ),
                    id="context-picker-list",
                )
            else:
                yield Static("No contexts found in kubeconfig", markup=False)

    def on_mount(self) -> None:
        with suppress(NoMatches):
            option_list = self.query_one(OptionList)
            if self.current in self.contexts:
                option_list.highlighted = self.contexts.index(self.current)
            option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss(None)
