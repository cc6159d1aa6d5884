"""Screen-specific keyboard bindings."""

from textual.binding import Binding

# ============================================================================
# Overview screen
# ============================================================================

OVERVIEW_SCREEN_BINDINGS: list[Binding] = [
    Binding("n", "toggle_nodes", "Nodes"),
    Binding("p", "toggle_pods", "Pods"),
    Binding("s", "pin_snapshot", "Pin"),
    Binding("d", "show_diff", "Diff"),
    Binding("o", "cycle_node_sort", "Sort nodes"),
    Binding("O", "cycle_pod_sort", "Sort pods"),
]

__all__ = [
    "OVERVIEW_SCREEN_BINDINGS",
]
