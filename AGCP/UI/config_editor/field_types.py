"""
Field Types Module - Typed validation and formatting for config values

Every config value is stored as a string. The field type attached to each
field decides which strings are acceptable, how they are normalised and
how they are displayed.

Types:
- BoolType: "true" / "false"
- TextType: free text, unsigned integers or TCP ports
- FloatType: bounded floating point numbers
- EnumType: one of a fixed, ordered set of values
"""
import re
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


_DIGITS = re.compile(r'[0-9]+')

# Largest value an unsigned 64-bit config integer can hold
UNSIGNED_MAX = 2**64 - 1


def looks_numeric(value: str) -> bool:
    """True if the string parses as a plain number"""
    if '_' in value or value.strip() != value:
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


class BoolType(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bool"] = "bool"

    def coerce(self, raw: str) -> str:
        value = raw.strip().lower()
        if value not in ("true", "false"):
            raise ValueError("Must be true or false")
        return value

    def format(self, value: str) -> str:
        return value

    @staticmethod
    def toggle(value: str) -> str:
        return "false" if value == "true" else "true"


class TextKind(str, Enum):
    """What a text field is allowed to hold"""
    FREE = "free"
    UNSIGNED = "unsigned"
    PORT = "port"


class TextType(BaseModel):
    """
    Free-form text field

    Text fields holding numbers (ports, timeouts, counts) declare it through
    text_kind so they are checked on edit while still rendering as text.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text_kind: TextKind = TextKind.FREE

    @property
    def is_numeric(self) -> bool:
        return self.text_kind is not TextKind.FREE

    def coerce(self, raw: str) -> str:
        if self.text_kind is TextKind.FREE:
            return raw

        value = raw.strip()
        if self.text_kind is TextKind.PORT:
            if not _DIGITS.fullmatch(value) or int(value) > 65535:
                raise ValueError("Must be a number 1-65535")
            if int(value) == 0:
                raise ValueError("Port must be 1-65535")
            return str(int(value))

        if not _DIGITS.fullmatch(value) or int(value) > UNSIGNED_MAX:
            raise ValueError("Must be a positive number")
        return str(int(value))

    def format(self, value: str) -> str:
        # Quote strings that aren't numbers
        if looks_numeric(value):
            return value
        return f'"{value}"'


class FloatType(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["float"] = "float"
    min: float
    max: float

    def coerce(self, raw: str) -> str:
        value = raw.strip()
        if not looks_numeric(value):
            raise ValueError(f"Must be a number between {self.min} and {self.max}")
        number = float(value)
        if not self.min <= number <= self.max:
            raise ValueError(f"Must be between {self.min} and {self.max}")
        return value

    def format(self, value: str) -> str:
        return value


class EnumType(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    values: List[str] = Field(min_length=1)

    def coerce(self, raw: str) -> str:
        value = raw.strip()
        if value not in self.values:
            raise ValueError(f"Must be one of: {', '.join(self.values)}")
        return value

    def format(self, value: str) -> str:
        return value

    def step(self, value: str, forward: bool = True) -> Optional[str]:
        """
        Neighbouring allowed value, wrapping at both ends

        Returns:
            The next (or previous) value, None if value is not in the set
        """
        if value not in self.values:
            return None
        idx = self.values.index(value)
        offset = 1 if forward else -1
        return self.values[(idx + offset) % len(self.values)]


FieldType = Annotated[
    Union[BoolType, TextType, FloatType, EnumType],
    Field(discriminator="kind"),
]
