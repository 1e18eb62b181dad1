"""Context picker modal."""

from kubefuzz.screens.context_picker.context_picker_modal import ContextPickerModal

__all__ = ["ContextPickerModal"]
