"""Limit and threshold constants for KubeLens.

All limit values, thresholds, and validation ranges.
"""

from typing import Final

# ============================================================================
# Validation limits
# ============================================================================

REFRESH_INTERVAL_MIN: Final = 1
REFRESH_INTERVAL_MAX: Final = 3600
PROBE_MAX_CONCURRENCY_MIN: Final = 1
PROBE_MAX_CONCURRENCY_MAX: Final = 256

# ============================================================================
# Display limits
# ============================================================================

BAR_GRAPH_WIDTH: Final = 10
SUMMARY_BAR_GRAPH_WIDTH: Final = 40

__all__ = [
    "BAR_GRAPH_WIDTH",
    "PROBE_MAX_CONCURRENCY_MAX",
    "PROBE_MAX_CONCURRENCY_MIN",
    "REFRESH_INTERVAL_MAX",
    "REFRESH_INTERVAL_MIN",
    "SUMMARY_BAR_GRAPH_WIDTH",
]
