"""Configuration management for levelctl.

Loads settings from an optional YAML configuration file with environment
variable overrides (``LEVELCTL_`` prefix, ``__`` for nesting). Supports
.env files. With no file and no overrides the defaults reproduce the
stock daemon: primary IPv4 address, port 8765, path ``/``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/levelctl.yaml")


class ServerConfig(BaseModel):
    host: str | None = Field(
        default=None, description="Bind host; None resolves the primary IPv4 address"
    )
    port: int = Field(default=8765, ge=0, le=65535)
    path: str = Field(default="/", pattern=r"^/")


class SupervisorConfig(BaseModel):
    heartbeat_interval: float = Field(default=1.0, gt=0)
    restart_backoff: float = Field(default=5.0, ge=0)


class DeviceConfig(BaseModel):
    backend: Literal["system", "memory"] = Field(default="system")
    backlight_device: str | None = Field(
        default=None, description="sysfs backlight name; None drives every device"
    )
    pactl_command: str = Field(default="pactl")
    sink: str = Field(default="@DEFAULT_SINK@")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the levelctl daemon.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "LEVELCTL_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    server: ServerConfig = Field(default_factory=ServerConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: init values (YAML) > env vars > .env file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)
