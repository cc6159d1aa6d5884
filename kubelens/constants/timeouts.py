"""Timeout constants for KubeLens.

All timeout and interval values for API requests, async operations, and refresh cycles.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"

# Process-level command timeouts (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45
AUTHZ_COMMAND_TIMEOUT: Final = 15

# ============================================================================
# Object mirror freshness (seconds)
# ============================================================================

OBJECT_CACHE_TTL: Final = 2
METRICS_CACHE_TTL: Final = 5

# ============================================================================
# Shutdown
# ============================================================================

CYCLE_SHUTDOWN_TIMEOUT: Final = 30.0

__all__ = [
    "AUTHZ_COMMAND_TIMEOUT",
    "CLUSTER_REQUEST_TIMEOUT",
    "CYCLE_SHUTDOWN_TIMEOUT",
    "KUBECTL_COMMAND_TIMEOUT",
    "METRICS_CACHE_TTL",
    "OBJECT_CACHE_TTL",
]
