"""
Config Editor Module - Edit session over a ConfigFieldSet

Tracks the selected field, the in-progress edit buffer and the inline
error message shown under the field. Rejected edits never raise out of
this class; they become the error message instead.
"""
import logging
from typing import Optional

from .config_field import ConfigEditError, ConfigField
from .config_field_set import ConfigFieldSet
from .field_types import BoolType, EnumType


class ConfigEditor:
    """
    Interactive editing state for the config view

    Attributes:
        fields: The field set being edited
        selected: Index of the highlighted field
        editing: Whether a text edit is in progress
        buffer: Text being typed while editing
        error: Message for the last rejected edit, naming the field
        needs_restart: Set once changes were saved and the daemon must restart
    """

    def __init__(self, fields: ConfigFieldSet):
        self.fields = fields
        self.selected = 0
        self.editing = False
        self.buffer = ""
        self.error: Optional[str] = None
        self.needs_restart = False
        self.logger = logging.getLogger(__name__)

    @property
    def current(self) -> Optional[ConfigField]:
        if 0 <= self.selected < len(self.fields):
            return self.fields[self.selected]
        return None

    def select_next(self) -> None:
        if self.selected < len(self.fields) - 1:
            self.selected += 1

    def select_prev(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def start_edit(self) -> None:
        field = self.current
        if field is None:
            return
        self.editing = True
        self.buffer = field.current_value
        self.error = None

    def cancel_edit(self) -> None:
        self.editing = False
        self.buffer = ""
        self.error = None

    def confirm_edit(self) -> bool:
        """
        Validate the buffer and store it in the selected field

        Returns:
            True if the value was accepted. On rejection editing continues
            and error holds the message.
        """
        field = self.current
        if field is None or not self.editing:
            return False

        try:
            self.fields.set_value(field.qualified_key, self.buffer)
        except ConfigEditError as e:
            self.error = f"{e.key}: {e.message}"
            return False

        self.editing = False
        self.buffer = ""
        self.error = None
        return True

    def _apply(self, operation, *args) -> bool:
        field = self.current
        if field is None:
            return False
        try:
            operation(field.qualified_key, *args)
        except ConfigEditError as e:
            self.logger.debug(f"Ignored edit on {field.qualified_key}: {e.message}")
            return False
        return True

    def toggle(self) -> bool:
        """Toggle the selected boolean field"""
        return self._apply(self.fields.toggle_bool)

    def cycle(self, forward: bool = True) -> bool:
        """Cycle the selected enum field"""
        return self._apply(self.fields.cycle_enum, forward)

    def activate(self) -> None:
        """Default action for the selected field: toggle, cycle or edit"""
        field = self.current
        if field is None:
            return
        if isinstance(field.field_type, BoolType):
            self.toggle()
        elif isinstance(field.field_type, EnumType):
            self.cycle(True)
        else:
            self.start_edit()

    def mark_saved(self) -> None:
        """Record a successful write of the current values"""
        self.fields.commit()
        self.needs_restart = True
        self.logger.info("Config changes saved; daemon restart required")

    @property
    def status(self) -> Optional[str]:
        """Footer message for the config view"""
        if self.needs_restart:
            return "Config saved. Press 'r' to restart daemon."
        if self.fields.has_changes():
            return "Unsaved changes. Press 's' to save."
        return None
