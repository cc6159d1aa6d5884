"""All enum definitions for KubeLens.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Status Enums
# =============================================================================

class NodeStatus(Enum):
    """Node status values from Kubernetes API."""

    READY = "Ready"
    NOT_READY = "NotReady"
    UNKNOWN = "Unknown"


class ProbeState(str, Enum):
    """Service state tokens reported by the remote host probe.

    The empty token means the state is unknown or the host was unreachable.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    FAILED = "failed"
    ACTIVATING = "activating"
    DEACTIVATING = "deactivating"
    UNKNOWN = ""


# =============================================================================
# Fetch State Enums
# =============================================================================

class FetchState(Enum):
    """Data fetch state values."""

    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class RefreshCycle(Enum):
    """Periodic refresh cycles run by the refresh controller."""

    NODES = "nodes"
    SUMMARY = "summary"


# =============================================================================
# Sort Enums
# =============================================================================

class NodeSortField(Enum):
    """Sortable node table columns."""

    NAME = "name"
    STATUS = "status"
    AGE = "age"
    CPU = "cpu"
    MEMORY = "memory"
    PODS = "pods"


class PodSortField(Enum):
    """Sortable pod table columns."""

    NAMESPACE = "namespace"
    NAME = "name"
    NODE = "node"
    STATUS = "status"
    RESTARTS = "restarts"
    AGE = "age"
    CPU = "cpu"
    MEMORY = "memory"


__all__ = [
    "FetchState",
    "NodeSortField",
    "NodeStatus",
    "PodSortField",
    "ProbeState",
    "RefreshCycle",
]
