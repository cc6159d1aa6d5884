"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kubelens.constants.defaults import (
    AUTHORIZED_RESOURCES_DEFAULT,
    LOG_LEVEL_DEFAULT,
    PROBE_MAX_CONCURRENCY_DEFAULT,
    PROBE_SERVICE_DEFAULT,
    PROBE_SSH_BINARY_DEFAULT,
    PROBE_USE_SUDO_DEFAULT,
    REFRESH_INTERVAL_DEFAULT,
)
from kubelens.constants.enums import NodeSortField, PodSortField
from kubelens.constants.limits import (
    PROBE_MAX_CONCURRENCY_MAX,
    PROBE_MAX_CONCURRENCY_MIN,
    REFRESH_INTERVAL_MAX,
    REFRESH_INTERVAL_MIN,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Cluster
    context: str | None = None
    namespace: str | None = None  # scopes pod listings; None means all

    # Refresh
    refresh_interval: float = Field(
        default=REFRESH_INTERVAL_DEFAULT,
        ge=REFRESH_INTERVAL_MIN,
        le=REFRESH_INTERVAL_MAX,
    )
    authorized_resources: list[str] = Field(
        default_factory=lambda: list(AUTHORIZED_RESOURCES_DEFAULT)
    )

    # Host probe
    probe_service: str = PROBE_SERVICE_DEFAULT
    probe_user: str | None = None
    probe_ssh_binary: str = PROBE_SSH_BINARY_DEFAULT
    probe_use_sudo: bool = PROBE_USE_SUDO_DEFAULT
    probe_timeout_seconds: float | None = None  # None: caller bounds concurrency only
    probe_max_concurrency: int = Field(
        default=PROBE_MAX_CONCURRENCY_DEFAULT,
        ge=PROBE_MAX_CONCURRENCY_MIN,
        le=PROBE_MAX_CONCURRENCY_MAX,
    )

    # UI preferences
    node_sort_field: NodeSortField = NodeSortField.NAME
    pod_sort_field: PodSortField = PodSortField.NAMESPACE
    show_nodes: bool = True
    show_pods: bool = True

    # Logging
    log_level: str = LOG_LEVEL_DEFAULT
    log_file: str | None = None

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = str(value).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("authorized_resources")
    @classmethod
    def _strip_resources(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
