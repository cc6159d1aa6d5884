"""Caching and snapshot retention models."""

from kubelens.models.cache.data_cache import DataCache
from kubelens.models.cache.snapshot_store import (
    RetainedSnapshot,
    SnapshotDiff,
    SnapshotStore,
    diff_snapshots,
)

__all__ = [
    "DataCache",
    "RetainedSnapshot",
    "SnapshotDiff",
    "SnapshotStore",
    "diff_snapshots",
]
