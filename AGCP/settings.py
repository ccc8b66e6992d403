"""
Dashboard settings read from the environment (and a .env file if present)
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "agcp"


class Settings(BaseModel):
    config_dir: Path = Field(default_factory=_default_config_dir)
    log_path: Optional[Path] = None
    initial_log_lines: int = Field(default=500, ge=0)
    max_log_entries: int = Field(default=1000, ge=1)
    poll_interval: float = Field(default=0.5, gt=0)
    app_log_dir: Path = Path("app_log")
    app_log_level: str = "INFO"

    @property
    def config_path(self) -> Path:
        return self.config_dir / "config.toml"

    @property
    def daemon_log_path(self) -> Path:
        return self.log_path or self.config_dir / "agcp.log"


# Environment variable -> Settings field
ENV_VARS = {
    "AGCP_CONFIG_DIR": "config_dir",
    "AGCP_LOG_PATH": "log_path",
    "AGCP_INITIAL_LOG_LINES": "initial_log_lines",
    "AGCP_MAX_LOG_ENTRIES": "max_log_entries",
    "AGCP_POLL_INTERVAL": "poll_interval",
    "AGCP_APP_LOG_DIR": "app_log_dir",
    "AGCP_APP_LOG_LEVEL": "app_log_level",
}


def load_settings() -> Settings:
    """
    Build Settings from AGCP_* environment variables

    Unset variables keep their defaults. Malformed values raise
    pydantic.ValidationError.
    """
    values = {}
    for env_name, field_name in ENV_VARS.items():
        value = os.getenv(env_name)
        if value:
            values[field_name] = value
    return Settings(**values)
