"""Application state and settings models."""

from kubelens.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)
from kubelens.models.state.config_manager import ConfigManager

__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
