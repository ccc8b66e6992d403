"""
Config Loader Module - AGCP config.toml to editable fields and back

Handles:
- Reading config.toml merged over the daemon's defaults
- Building the editable field catalogue
- Converting edited fields into a typed config mapping for the writer
"""
import copy
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from .config_field import ConfigField
from .config_field_set import ConfigFieldSet
from .field_types import BoolType, EnumType, FloatType, TextKind, TextType


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "server": {
        "port": 8080,
        "host": "127.0.0.1",
        "request_timeout_secs": 300,
    },
    "logging": {
        "debug": False,
        "log_requests": False,
    },
    "accounts": {
        "strategy": "hybrid",
        "quota_threshold": 0.1,
        "fallback": False,
    },
    "cache": {
        "enabled": True,
        "ttl_seconds": 300,
        "max_entries": 100,
    },
    "cloudcode": {
        "timeout_secs": 120,
        "max_retries": 5,
        "max_concurrent_requests": 1,
        "min_request_interval_ms": 500,
    },
}

# (section, key, type, description) in display order
FIELD_CATALOGUE = [
    ("server", "port", TextType(text_kind=TextKind.PORT),
     "TCP port the proxy listens on (1-65535)"),
    ("server", "host", TextType(),
     "Bind address for the proxy (e.g. 127.0.0.1 or 0.0.0.0 for all interfaces)"),
    ("server", "request_timeout_secs", TextType(text_kind=TextKind.UNSIGNED),
     "Maximum time in seconds to wait for a response before timing out"),
    ("logging", "debug", BoolType(),
     "Enable verbose debug logging (includes request/response details)"),
    ("logging", "log_requests", BoolType(),
     "Log each API request with model, status, and duration"),
    ("accounts", "strategy", EnumType(values=["sticky", "roundrobin", "hybrid"]),
     "Account selection strategy: sticky (stay until rate-limited), "
     "roundrobin (rotate each request), hybrid (smart selection)"),
    ("accounts", "quota_threshold", FloatType(min=0.0, max=1.0),
     "Switch accounts when quota remaining drops below this fraction (0.0-1.0)"),
    ("accounts", "fallback", BoolType(),
     "Try alternate model endpoints when the primary returns capacity errors"),
    ("cache", "enabled", BoolType(),
     "Enable response caching for identical requests (reduces API usage)"),
    ("cache", "ttl_seconds", TextType(text_kind=TextKind.UNSIGNED),
     "How long cached responses remain valid, in seconds"),
    ("cache", "max_entries", TextType(text_kind=TextKind.UNSIGNED),
     "Maximum number of responses to keep in the LRU cache"),
    ("cloudcode", "timeout_secs", TextType(text_kind=TextKind.UNSIGNED),
     "Timeout in seconds for Google Cloud Code API requests"),
    ("cloudcode", "max_retries", TextType(text_kind=TextKind.UNSIGNED),
     "Maximum number of retry attempts for failed or rate-limited requests"),
    ("cloudcode", "max_concurrent_requests", TextType(text_kind=TextKind.UNSIGNED),
     "Maximum number of simultaneous requests to the Cloud Code API"),
    ("cloudcode", "min_request_interval_ms", TextType(text_kind=TextKind.UNSIGNED),
     "Minimum delay in milliseconds between consecutive API requests"),
]


class ConfigLoadError(Exception):
    """config.toml exists but could not be read or parsed"""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config from {path}: {reason}")


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load config.toml merged over the defaults

    Unknown sections and keys are kept so that a writer can round-trip them.

    Args:
        path: Location of config.toml

    Returns:
        Nested mapping section -> key -> value

    Raises:
        ConfigLoadError: If the file is unreadable or not valid TOML
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = Path(path)
    if not path.exists():
        logger.info(f"No config at {path}, using defaults")
        return config

    try:
        loaded = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigLoadError(path, str(e)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigLoadError(path, f"Invalid TOML syntax: {e}") from e

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def _to_field_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_config_fields(config: Dict[str, Any]) -> ConfigFieldSet:
    """
    Build the editable field list from a loaded config

    Values missing from the config fall back to the defaults.
    """
    fields = []
    for section, key, field_type, description in FIELD_CATALOGUE:
        value = config.get(section, {}).get(key, DEFAULT_CONFIG[section][key])
        fields.append(ConfigField(
            section=section,
            key=key,
            field_type=field_type,
            original_value=_to_field_string(value),
            description=description,
        ))
    return ConfigFieldSet(fields)


def apply_fields(field_set: ConfigFieldSet, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply edited values to a copy of the config

    Numeric values that do not parse leave the existing setting in place.

    Args:
        field_set: Fields holding the edited values
        config: Config the fields were built from

    Returns:
        New nested mapping ready to be written back to config.toml
    """
    updated = copy.deepcopy(config)
    for field in field_set:
        section = updated.setdefault(field.section, {})
        value = field.current_value
        field_type = field.field_type

        if isinstance(field_type, BoolType):
            section[field.key] = value == "true"
        elif isinstance(field_type, FloatType):
            try:
                section[field.key] = float(value)
            except ValueError:
                logger.warning(f"Keeping previous {field.qualified_key}: {value!r} is not a number")
        elif isinstance(field_type, TextType) and field_type.is_numeric:
            try:
                section[field.key] = int(value)
            except ValueError:
                logger.warning(f"Keeping previous {field.qualified_key}: {value!r} is not an integer")
        else:
            section[field.key] = value
    return updated
