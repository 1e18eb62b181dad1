"""Main application class for KubeFuzz."""

from __future__ import annotations

import logging
from functools import partial

from textual.app import App, SuspendNotSupported
from textual.binding import Binding

from kubefuzz.actions import PAUSE_AFTER, ActionDispatcher, ActionResult, Selection
from kubefuzz.constants import APP_TITLE
from kubefuzz.constants.defaults import ALL_CONTEXTS_LABEL, CURRENT_CONTEXT_FALLBACK
from kubefuzz.constants.enums import ContextSource, TriggerKey
from kubefuzz.controllers.cluster import Aggregator, ContextManager, MergedView
from kubefuzz.keyboard.app import APP_BINDINGS
from kubefuzz.models.state import NavigatorSettings
from kubefuzz.screens import ContextPickerModal, NavigatorScreen
from kubefuzz.utils.runtime_dir import PreviewState, RuntimeDir

logger = logging.getLogger(__name__)


class NavigatorApp(App[None]):
    """Main TUI application for KubeFuzz.

    Watch contexts are started and switched in thread workers because the
    context manager blocks until the first listing lands (or times out).
    Actions run on the app thread while the terminal is handed to kubectl.
    """

    TITLE = APP_TITLE
    BINDINGS: list[Binding] = APP_BINDINGS
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        settings: NavigatorSettings,
        context_manager: ContextManager,
        dispatcher: ActionDispatcher | None = None,
        runtime_dir: RuntimeDir | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.context_manager = context_manager
        self.dispatcher = dispatcher or ActionDispatcher(kubeconfig=settings.kubeconfig)
        self.preview_state = PreviewState(runtime_dir=runtime_dir)
        self.contexts_ready = False
        self.last_result: ActionResult | None = None

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(NavigatorScreen())
        self.run_worker(
            self._start_contexts,
            thread=True,
            exclusive=True,
            group="contexts",
            name="start-contexts",
        )

    # Contexts ------------------------------------------------------------------

    @property
    def context_label(self) -> str:
        if not self.contexts_ready:
            return "connecting…"
        active = self.context_manager.active
        if len(active) > 1:
            label = ALL_CONTEXTS_LABEL
        else:
            label = ", ".join(ctx.name for ctx in active) or CURRENT_CONTEXT_FALLBACK
        if any(ctx.source is ContextSource.DEMO for ctx in active):
            label += " (demo)"
        return label

    def current_view(self) -> Aggregator | MergedView | None:
        if not self.context_manager.active:
            return None
        return self.context_manager.view()

    def _start_contexts(self) -> None:
        manager = self.context_manager
        try:
            if self.settings.all_contexts:
                names = manager.list_contexts() or [manager.current_context()]
                manager.start_all(names)
            else:
                manager.start(manager.initial_context(self.settings.context))
        except Exception as exc:
            logger.exception("Failed to start watching")
            self.call_from_thread(
                self.notify, f"Failed to start watching: {exc}", severity="error"
            )
            return
        self.call_from_thread(self._after_context_change)

    def _switch_context(self, name: str) -> None:
        try:
            self.context_manager.switch(name)
        except Exception as exc:
            logger.exception("Failed to switch to context %r", name)
            self.call_from_thread(
                self.notify, f"Failed to switch to {name}: {exc}", severity="error"
            )
            return
        self.settings.all_contexts = False
        self.call_from_thread(self._after_context_change)

    def _after_context_change(self) -> None:
        names = self.context_manager.active_names
        single = names[0] if len(names) == 1 else None
        self.dispatcher.context = None if single == CURRENT_CONTEXT_FALLBACK else single
        self.contexts_ready = True
        for warning in self.context_manager.pop_warnings():
            self.notify(warning, severity="warning", timeout=8)
        if isinstance(self.screen, NavigatorScreen):
            self.screen.refresh_view(force=True)

    def _load_context_choices(self) -> None:
        names = self.context_manager.list_contexts()
        active = self.context_manager.active_names
        current = active[0] if len(active) == 1 else None
        self.call_from_thread(
            self.push_screen, ContextPickerModal(names, current), self._on_context_picked
        )

    def _on_context_picked(self, name: str | None) -> None:
        if not name:
            return
        self.contexts_ready = False
        self.notify(f"Switching to {name}…")
        self.run_worker(
            partial(self._switch_context, name),
            thread=True,
            exclusive=True,
            group="contexts",
            name="switch-context",
        )

    # Actions -------------------------------------------------------------------

    def dispatch_selection(self, selection: Selection) -> ActionResult | None:
        """Hand a finished selection to the dispatcher and report the outcome."""
        trigger = selection.trigger
        if trigger is TriggerKey.SWITCH_CONTEXT:
            self.run_worker(self._load_context_choices, thread=True, group="picker")
            return None

        needs_terminal = (
            trigger is not TriggerKey.PREVIEW_CYCLE
            and bool(selection.items)
            and not (self.settings.read_only and trigger.is_mutating)
        )
        if needs_terminal:
            result = self._run_with_terminal(selection)
        else:
            result = self.dispatcher.dispatch(
                selection.items, trigger, self.settings.read_only, self.preview_state
            )
        self.last_result = result
        if result.message:
            self.notify(result.message, severity="information" if result.ok else "error")
        return result

    def _run_with_terminal(self, selection: Selection) -> ActionResult:
        try:
            with self.suspend():
                result = self.dispatcher.dispatch(
                    selection.items,
                    selection.trigger,
                    self.settings.read_only,
                    self.preview_state,
                )
                if selection.trigger in PAUSE_AFTER:
                    self._wait_for_enter()
        except SuspendNotSupported:
            logger.warning("Terminal hand-over is not supported in this environment")
            return ActionResult(ok=False, message="This terminal cannot run interactive actions")
        return result

    def _wait_for_enter(self) -> None:
        try:
            self.dispatcher.console.input("\n[dim]Press Enter to return[/dim]")
        except (EOFError, KeyboardInterrupt):
            pass


__all__ = ["NavigatorApp"]
