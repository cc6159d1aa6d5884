"""Controllers module for KubeLens.

This module provides the kubectl-backed data sources, the host prober and the
refresh controller that turns them into periodic snapshots.
"""

from __future__ import annotations

# Base classes
from kubelens.controllers.base import (
    BaseController,
    FetchStatus,
    KubectlCommandError,
    KubectlController,
)

# Errors
from kubelens.controllers.errors import (
    AuthorizationCheckError,
    AuthorizationDeniedError,
    KubeLensError,
    MetricsUnavailableError,
    RefreshControllerError,
    SourceUnavailableError,
)

# Refresh cycles
from kubelens.controllers.refresh import RefreshController

__all__ = [
    "AuthorizationCheckError",
    "AuthorizationDeniedError",
    "BaseController",
    "FetchStatus",
    "KubeLensError",
    "KubectlCommandError",
    "KubectlController",
    "MetricsUnavailableError",
    "RefreshController",
    "RefreshControllerError",
    "SourceUnavailableError",
]
