"""Constants module for KubeLens.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (labels, status strings)
- timeouts.py: Timeout and cache freshness values (seconds)
- limits.py: Limit values (max/min)
- defaults.py: Default values for settings
"""

from kubelens.constants.defaults import (
    AUTHORIZATION_VERBS,
    AUTHORIZED_RESOURCES_DEFAULT,
    PROBE_SERVICE_DEFAULT,
    REFRESH_INTERVAL_DEFAULT,
)
from kubelens.constants.enums import (
    FetchState,
    NodeSortField,
    NodeStatus,
    PodSortField,
    ProbeState,
    RefreshCycle,
)
from kubelens.constants.limits import (
    BAR_GRAPH_WIDTH,
    REFRESH_INTERVAL_MIN,
    SUMMARY_BAR_GRAPH_WIDTH,
)
from kubelens.constants.values import APP_TITLE

__all__ = [
    "APP_TITLE",
    "AUTHORIZATION_VERBS",
    "AUTHORIZED_RESOURCES_DEFAULT",
    "BAR_GRAPH_WIDTH",
    "FetchState",
    "NodeSortField",
    "NodeStatus",
    "PROBE_SERVICE_DEFAULT",
    "PodSortField",
    "ProbeState",
    "REFRESH_INTERVAL_DEFAULT",
    "REFRESH_INTERVAL_MIN",
    "RefreshCycle",
    "SUMMARY_BAR_GRAPH_WIDTH",
]
