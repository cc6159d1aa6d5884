"""Default values for settings.

All default values used in AppSettings model and validation fallback values.
"""

from typing import Final

# ============================================================================
# Refresh defaults
# ============================================================================

REFRESH_INTERVAL_DEFAULT: Final = 5

# ============================================================================
# Host probe defaults
# ============================================================================

PROBE_SERVICE_DEFAULT: Final = "scini"
PROBE_SSH_BINARY_DEFAULT: Final = "ssh"
PROBE_USE_SUDO_DEFAULT: Final = True
PROBE_MAX_CONCURRENCY_DEFAULT: Final = 32

# ============================================================================
# Authorization defaults
# ============================================================================

AUTHORIZED_RESOURCES_DEFAULT: Final = ("nodes",)
AUTHORIZATION_VERBS: Final = ("get", "list")

# ============================================================================
# Logging defaults
# ============================================================================

LOG_LEVEL_DEFAULT: Final = "INFO"

__all__ = [
    "AUTHORIZATION_VERBS",
    "AUTHORIZED_RESOURCES_DEFAULT",
    "LOG_LEVEL_DEFAULT",
    "PROBE_MAX_CONCURRENCY_DEFAULT",
    "PROBE_SERVICE_DEFAULT",
    "PROBE_SSH_BINARY_DEFAULT",
    "PROBE_USE_SUDO_DEFAULT",
    "REFRESH_INTERVAL_DEFAULT",
]
