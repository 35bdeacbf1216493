"""Configuration loading and validation."""

from .loader import AppConfig, ConfigError, load_config

__all__ = [
    "AppConfig",
    "ConfigError",
    "load_config",
]
