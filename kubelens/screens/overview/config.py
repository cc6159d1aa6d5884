"""Overview screen configuration - column definitions and widget IDs."""

from __future__ import annotations

from kubelens.constants.enums import NodeSortField, PodSortField

# =============================================================================
# Widget IDs
# =============================================================================

SUMMARY_PANEL_ID = "overview-summary"
NODES_TABLE_ID = "overview-nodes"
PODS_TABLE_ID = "overview-pods"
DIFF_TABLE_ID = "overview-diff"
STATUS_BAR_ID = "overview-status"

# =============================================================================
# Table Column Definitions: list[tuple[str, int]] = [(name, width), ...]
# =============================================================================

NODE_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("", 2),
    ("Name", 28),
    ("Status", 12),
    ("Age", 8),
    ("Version", 12),
    ("Int/Ext IPs", 30),
    ("OS/Arch", 24),
    ("Pods/Imgs", 10),
    ("Disk", 10),
    ("CPU", 36),
    ("Memory", 36),
]

POD_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Namespace", 20),
    ("Pod", 40),
    ("Ready", 7),
    ("Status", 18),
    ("Restarts", 9),
    ("Age", 8),
    ("Vols", 6),
    ("IP", 16),
    ("Node", 24),
    ("CPU", 36),
    ("Memory", 36),
]

DIFF_TABLE_COLUMNS: list[tuple[str, int]] = [
    ("Change", 8),
    ("Namespace", 20),
    ("Pod", 40),
    ("Status", 18),
    ("Node", 24),
]

# =============================================================================
# Sort cycling order
# =============================================================================

NODE_SORT_ORDER: list[NodeSortField] = list(NodeSortField)
POD_SORT_ORDER: list[PodSortField] = list(PodSortField)
