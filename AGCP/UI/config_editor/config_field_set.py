"""
Config Field Set Module - Ordered collection of editable config fields

Handles:
- Lookup by key or "section.key"
- Type-directed edits (set, toggle, cycle)
- Change tracking against the loaded values
- Commit after an external save
"""
import logging
from typing import Iterable, Iterator, List, Tuple

from .config_field import ConfigField, ConfigValidationError, WrongFieldTypeError
from .field_types import BoolType, EnumType


logger = logging.getLogger(__name__)


class ConfigFieldSet:
    """
    Ordered configuration fields grouped by section

    Sections are not stored separately; consecutive fields sharing a
    section form a group. A (section, key) pair appears at most once.
    """

    def __init__(self, fields: Iterable[ConfigField] = ()):
        self._fields: List[ConfigField] = list(fields)

        seen = set()
        for field in self._fields:
            if field.qualified_key in seen:
                raise ValueError(f"Duplicate config field: {field.qualified_key}")
            seen.add(field.qualified_key)

    @property
    def fields(self) -> List[ConfigField]:
        return list(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[ConfigField]:
        return iter(self._fields)

    def __getitem__(self, index: int) -> ConfigField:
        return self._fields[index]

    def get(self, key: str) -> ConfigField:
        """
        Find a field by "section.key" or by bare key

        A bare key resolves to the first field with that key.

        Raises:
            KeyError: If no field matches
        """
        for field in self._fields:
            if field.qualified_key == key:
                return field
        for field in self._fields:
            if field.key == key:
                return field
        raise KeyError(key)

    def set_value(self, key: str, raw_value: str) -> ConfigField:
        """
        Replace a field's current value after validating it

        Args:
            key: Field key or "section.key"
            raw_value: Value as typed by the user

        Returns:
            The updated field

        Raises:
            ConfigValidationError: If the value does not fit the field type;
                the field is left unchanged
        """
        field = self.get(key)
        try:
            value = field.field_type.coerce(raw_value)
        except ValueError as e:
            logger.debug(f"Rejected value {raw_value!r} for {field.qualified_key}: {e}")
            raise ConfigValidationError(field.key, str(e)) from e

        field.current_value = value
        return field

    def cycle_enum(self, key: str, forward: bool = True) -> str:
        """
        Move an enum field to its next or previous allowed value

        Returns:
            The field's current value after the move

        Raises:
            WrongFieldTypeError: If the field is not an enum
        """
        field = self.get(key)
        if not isinstance(field.field_type, EnumType):
            raise WrongFieldTypeError(field.key, "Not an enum field")

        new_value = field.field_type.step(field.current_value, forward)
        if new_value is not None:
            field.current_value = new_value
        return field.current_value

    def toggle_bool(self, key: str) -> str:
        """
        Flip a boolean field

        Raises:
            WrongFieldTypeError: If the field is not a boolean
        """
        field = self.get(key)
        if not isinstance(field.field_type, BoolType):
            raise WrongFieldTypeError(field.key, "Not a boolean field")

        field.current_value = BoolType.toggle(field.current_value)
        return field.current_value

    @staticmethod
    def format_display(field: ConfigField) -> str:
        """Render a field's current value the way the config view shows it"""
        return field.field_type.format(field.current_value)

    def diff(self) -> List[Tuple[str, str, str]]:
        """(key, original, current) for every modified field, in order"""
        return [
            (field.key, field.original_value, field.current_value)
            for field in self._fields
            if field.is_modified()
        ]

    def has_changes(self) -> bool:
        return any(field.is_modified() for field in self._fields)

    def validate_all(self) -> List[Tuple[str, str]]:
        """(key, message) for every field whose current value is invalid"""
        errors = []
        for field in self._fields:
            try:
                field.validate_current()
            except ConfigValidationError as e:
                errors.append((e.key, e.message))
        return errors

    def commit(self) -> None:
        """Accept all current values as the new originals after a save"""
        self._fields = [field.committed() for field in self._fields]

    def revert(self) -> None:
        """Discard unsaved edits"""
        for field in self._fields:
            field.current_value = field.original_value

    def sections(self) -> List[Tuple[str, List[ConfigField]]]:
        """Group consecutive fields by section, preserving order"""
        groups: List[Tuple[str, List[ConfigField]]] = []
        for field in self._fields:
            if groups and groups[-1][0] == field.section:
                groups[-1][1].append(field)
            else:
                groups.append((field.section, [field]))
        return groups
