"""Data models for KubeLens."""

from kubelens.models.cache import RetainedSnapshot, SnapshotDiff, SnapshotStore
from kubelens.models.core import (
    ClusterSummary,
    NodeModel,
    PodModel,
    ReadyTally,
    ResourceUsage,
)

__all__ = [
    "ClusterSummary",
    "NodeModel",
    "PodModel",
    "ReadyTally",
    "ResourceUsage",
    "RetainedSnapshot",
    "SnapshotDiff",
    "SnapshotStore",
]
