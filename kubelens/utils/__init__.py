"""Utility functions for KubeLens."""

from kubelens.utils.concurrent_map import concurrent_map
from kubelens.utils.model_sorter import sort_nodes, sort_pods

__all__ = [
    "concurrent_map",
    "sort_nodes",
    "sort_pods",
]
