"""Configuration management for levelctl.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for every setting.
"""

from levelctl.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
