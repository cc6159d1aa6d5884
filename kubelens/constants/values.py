"""Scalar constants for KubeLens."""

from typing import Final

APP_TITLE: Final = "KubeLens"

# ============================================================================
# Kubernetes labels and condition names
# ============================================================================

CONTROL_PLANE_LABELS: Final = (
    "node-role.kubernetes.io/control-plane",
    "node-role.kubernetes.io/master",
)
PRESSURE_CONDITIONS: Final = (
    "MemoryPressure",
    "DiskPressure",
    "PIDPressure",
    "NetworkUnavailable",
)
ETCD_COMPONENT_LABEL: Final = "component"
ETCD_COMPONENT_VALUE: Final = "etcd"

# ============================================================================
# Pod status strings
# ============================================================================

POD_STATUS_COMPLETED: Final = "Completed"
POD_STATUS_TERMINATING: Final = "Terminating"

# ============================================================================
# Placeholders
# ============================================================================

ADDRESS_NONE: Final = "<none>"

__all__ = [
    "ADDRESS_NONE",
    "APP_TITLE",
    "CONTROL_PLANE_LABELS",
    "ETCD_COMPONENT_LABEL",
    "ETCD_COMPONENT_VALUE",
    "POD_STATUS_COMPLETED",
    "POD_STATUS_TERMINATING",
    "PRESSURE_CONDITIONS",
]
