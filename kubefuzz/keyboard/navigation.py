"""Screen-specific keyboard bindings.

Trigger keys end a selection cycle and hand the selection to the action
dispatcher; they use the key names stored on ``TriggerKey``. All navigator
bindings are priority bindings because printable keys feed the filter and
the table would otherwise consume ``enter`` and ``tab``.
"""

from textual.binding import Binding

from kubefuzz.constants.enums import TriggerKey

# ============================================================================
# Navigator screen
# ============================================================================

TRIGGER_BINDINGS: list[Binding] = [
    Binding(TriggerKey.DESCRIBE.value, "trigger('DESCRIBE')", "Describe", priority=True),
    Binding(TriggerKey.LOGS.value, "trigger('LOGS')", "Logs", priority=True),
    Binding(TriggerKey.EXEC.value, "trigger('EXEC')", "Exec", priority=True),
    Binding(TriggerKey.DELETE.value, "trigger('DELETE')", "Delete", priority=True),
    Binding(TriggerKey.PORT_FORWARD.value, "trigger('PORT_FORWARD')", "Port-fwd", priority=True),
    Binding(TriggerKey.RESTART.value, "trigger('RESTART')", "Restart", priority=True),
    Binding(TriggerKey.YAML.value, "trigger('YAML')", "YAML", priority=True),
    Binding(TriggerKey.PREVIEW_CYCLE.value, "trigger('PREVIEW_CYCLE')", "Preview", priority=True),
    Binding(TriggerKey.SWITCH_CONTEXT.value, "trigger('SWITCH_CONTEXT')", "Context", priority=True),
]

NAVIGATOR_SCREEN_BINDINGS: list[Binding] = [
    *TRIGGER_BINDINGS,
    Binding("tab", "toggle_select", "Select", show=False, priority=True),
    Binding("space", "toggle_select", "Select", show=False, priority=True),
    Binding("backspace", "filter_backspace", "Erase", show=False, priority=True),
    Binding("escape", "clear_or_quit", "Clear/Quit", show=False, priority=True),
]

# ============================================================================
# Context picker
# ============================================================================

CONTEXT_PICKER_BINDINGS: list[Binding] = [
    Binding("escape", "cancel", "Close"),
]

__all__ = [
    "CONTEXT_PICKER_BINDINGS",
    "NAVIGATOR_SCREEN_BINDINGS",
    "TRIGGER_BINDINGS",
]
