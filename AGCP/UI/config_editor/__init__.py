"""
Config Editor Package - In-memory model of the AGCP configuration editor

Package Structure:
- field_types: Typed validation/formatting (BoolType, TextType, FloatType, EnumType)
- config_field: Single field and edit errors (ConfigField, ConfigValidationError, WrongFieldTypeError)
- config_field_set: Ordered field collection (ConfigFieldSet)
- config_loader: config.toml loading and field catalogue
- editor: Selection and edit buffer (ConfigEditor)
"""

from .field_types import BoolType, EnumType, FloatType, TextKind, TextType
from .config_field import (
    ConfigEditError,
    ConfigField,
    ConfigValidationError,
    WrongFieldTypeError
)
from .config_field_set import ConfigFieldSet
from .config_loader import ConfigLoadError, apply_fields, build_config_fields, load_config
from .editor import ConfigEditor

__all__ = [
    # Field types
    'BoolType',
    'TextType',
    'TextKind',
    'FloatType',
    'EnumType',

    # Fields
    'ConfigField',
    'ConfigFieldSet',
    'ConfigEditor',

    # Errors
    'ConfigEditError',
    'ConfigValidationError',
    'WrongFieldTypeError',
    'ConfigLoadError',

    # Loading
    'load_config',
    'build_config_fields',
    'apply_fields',
]
