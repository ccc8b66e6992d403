"""
Config Field Module - A single editable configuration value
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .field_types import EnumType, FieldType, TextType


class ConfigEditError(Exception):
    """Base class for rejected config edits"""

    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")


class ConfigValidationError(ConfigEditError, ValueError):
    """The new value cannot be coerced to the field's type"""


class WrongFieldTypeError(ConfigEditError, TypeError):
    """The operation does not apply to the field's type"""


class ConfigField(BaseModel):
    """
    Editable configuration field

    original_value is the value loaded from (or last saved to) the config
    file and cannot be reassigned; a field is modified exactly when
    current_value differs from it.
    """
    model_config = ConfigDict(validate_assignment=True)

    section: str
    key: str
    field_type: FieldType
    original_value: str = Field(frozen=True)
    current_value: str
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_current(cls, data: Any) -> Any:
        if isinstance(data, dict) and "current_value" not in data:
            data = {**data, "current_value": data.get("original_value")}
        return data

    @property
    def qualified_key(self) -> str:
        return f"{self.section}.{self.key}"

    @property
    def is_numeric(self) -> bool:
        """Check if this field expects numeric input only"""
        if isinstance(self.field_type, TextType):
            return self.field_type.is_numeric
        return self.field_type.kind == "float"

    @property
    def is_enum(self) -> bool:
        return isinstance(self.field_type, EnumType)

    def is_modified(self) -> bool:
        return self.current_value != self.original_value

    def validate_current(self) -> None:
        """
        Check the current value against the field type

        Raises:
            ConfigValidationError: If the value is not acceptable
        """
        try:
            self.field_type.coerce(self.current_value)
        except ValueError as e:
            raise ConfigValidationError(self.key, str(e)) from e

    def committed(self) -> "ConfigField":
        """Copy of this field whose original value is the current value"""
        return self.model_copy(update={"original_value": self.current_value})
