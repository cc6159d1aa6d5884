"""YAML-backed persistence for AppSettings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from kubelens.models.state.app_settings import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads and saves settings at ``~/.config/kubelens/settings.yaml``."""

    CONFIG_FILE_NAME = "settings.yaml"

    @staticmethod
    def default_path() -> Path:
        """Resolve the settings path following XDG_CONFIG_HOME."""
        config_home = os.environ.get("XDG_CONFIG_HOME")
        base = Path(config_home) if config_home else Path.home() / ".config"
        return base / "kubelens" / ConfigManager.CONFIG_FILE_NAME

    @classmethod
    def load(cls, path: Path | None = None) -> AppSettings:
        """Load settings, returning defaults when the file does not exist.

        Raises:
            ConfigLoadError: The file exists but is unreadable or invalid.
        """
        config_path = path or cls.default_path()
        if not config_path.exists():
            logger.debug("No settings file at %s, using defaults", config_path)
            return AppSettings()

        try:
            raw: Any = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Failed to read {config_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"Settings file {config_path} must contain a mapping")

        try:
            settings = AppSettings.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {config_path}: {exc}") from exc

        logger.debug("Loaded settings from %s", config_path)
        return settings

    @classmethod
    def save(cls, settings: AppSettings, path: Path | None = None) -> Path:
        """Persist settings as YAML.

        Raises:
            ConfigSaveError: The file could not be written.
        """
        config_path = path or cls.default_path()
        payload = settings.model_dump(mode="json")
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(
                yaml.safe_dump(payload, default_flow_style=False, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigSaveError(f"Failed to write {config_path}: {exc}") from exc

        logger.debug("Saved settings to %s", config_path)
        return config_path


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSaveError",
]
