"""Retention store for pinned pod snapshots and snapshot diffing.

The store keeps two independently owned pod lists: the latest live slice
published by the refresh controller and one user-pinned snapshot. Every
value that enters or leaves the store is deep-copied, so neither the
controller's working list nor a caller can mutate retained state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from kubelens.models.core.pod_model import PodModel

logger = logging.getLogger(__name__)


class RetainedSnapshot(BaseModel):
    """Deep copy of a pod list plus its capture time."""

    pods: list[PodModel] = Field(default_factory=list)
    captured_at: datetime

    def clone(self) -> RetainedSnapshot:
        return self.model_copy(deep=True)


class SnapshotDiff(BaseModel):
    """Pods added to and removed from a pinned snapshot."""

    added: list[PodModel] = Field(default_factory=list)
    removed: list[PodModel] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


def copy_pods(pods: Iterable[PodModel]) -> list[PodModel]:
    """Deep-copy a pod list."""
    return [pod.clone() for pod in pods]


def diff_snapshots(
    pinned: Iterable[PodModel],
    current: Iterable[PodModel],
) -> SnapshotDiff:
    """Compute the symmetric difference between two pod lists.

    Pods are matched by (namespace, name). ``added`` keeps the order of
    ``current`` and ``removed`` keeps the order of ``pinned``. The inputs are
    not modified and the result holds copies.
    """
    pinned_list = list(pinned)
    current_list = list(current)
    pinned_keys = {pod.identity for pod in pinned_list}
    current_keys = {pod.identity for pod in current_list}

    return SnapshotDiff(
        added=[pod.clone() for pod in current_list if pod.identity not in pinned_keys],
        removed=[pod.clone() for pod in pinned_list if pod.identity not in current_keys],
    )


class SnapshotStore:
    """Holds the latest live pod slice and one pinned snapshot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._live: list[PodModel] = []
        self._live_updated_at: datetime | None = None
        self._pinned: RetainedSnapshot | None = None

    def update_live(self, pods: Iterable[PodModel]) -> None:
        """Replace the live slice with a copy of ``pods``."""
        copied = copy_pods(pods)
        with self._lock:
            self._live = copied
            self._live_updated_at = datetime.now(timezone.utc)

    @property
    def live(self) -> list[PodModel]:
        with self._lock:
            return copy_pods(self._live)

    @property
    def live_updated_at(self) -> datetime | None:
        return self._live_updated_at

    @property
    def pinned(self) -> RetainedSnapshot | None:
        with self._lock:
            return self._pinned.clone() if self._pinned is not None else None

    @property
    def has_pinned(self) -> bool:
        return self._pinned is not None

    def pin(self, pods: Iterable[PodModel] | None = None) -> RetainedSnapshot:
        """Pin a copy of ``pods`` (or the latest live slice), replacing any prior pin."""
        with self._lock:
            source = self._live if pods is None else pods
            snapshot = RetainedSnapshot(
                pods=copy_pods(source),
                captured_at=datetime.now(timezone.utc),
            )
            self._pinned = snapshot
            logger.info("Pinned pod snapshot with %d pods", len(snapshot.pods))
            return snapshot.clone()

    def clear(self) -> None:
        """Drop the pinned snapshot."""
        with self._lock:
            self._pinned = None

    def diff(self, current: Iterable[PodModel] | None = None) -> SnapshotDiff:
        """Diff the pinned snapshot against ``current`` or the live slice.

        Returns an empty diff when nothing has been pinned.
        """
        with self._lock:
            if self._pinned is None:
                return SnapshotDiff()
            pinned_pods = list(self._pinned.pods)
            current_pods = list(self._live) if current is None else list(current)
            return diff_snapshots(pinned_pods, current_pods)
