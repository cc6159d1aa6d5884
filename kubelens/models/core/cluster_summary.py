"""Cluster-wide rollup models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class ReadyTally(BaseModel):
    """A (ready, total) pair where ready never exceeds total."""

    ready: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_ready_within_total(self) -> ReadyTally:
        if self.ready > self.total:
            raise ValueError(f"ready ({self.ready}) exceeds total ({self.total})")
        return self

    @classmethod
    def of(cls, ready: int, total: int) -> ReadyTally:
        """Build a tally, clamping inconsistent counts reported by the API."""
        total = max(0, int(total))
        return cls(ready=min(max(0, int(ready)), total), total=total)

    @property
    def all_ready(self) -> bool:
        return self.ready == self.total


class ClusterSummary(BaseModel):
    """Cluster-wide rollup, rebuilt wholesale every summary cycle."""

    namespaces: int = Field(default=0, ge=0)
    nodes: ReadyTally = Field(default_factory=ReadyTally)
    pressures: int = Field(default=0, ge=0)
    images_count: int = Field(default=0, ge=0)
    volumes_in_use: int = Field(default=0, ge=0)

    allocatable_cpu_mcores: float = Field(default=0.0, ge=0)
    allocatable_memory_bytes: float = Field(default=0.0, ge=0)
    usage_cpu_mcores: float = Field(default=0.0, ge=0)
    usage_memory_bytes: float = Field(default=0.0, ge=0)
    requested_cpu_mcores: float = Field(default=0.0, ge=0)
    requested_memory_bytes: float = Field(default=0.0, ge=0)

    pods_available: int = Field(default=0, ge=0)
    pods_running: int = Field(default=0, ge=0)

    kubelet: ReadyTally = Field(default_factory=ReadyTally)
    container_runtime: ReadyTally = Field(default_factory=ReadyTally)
    probe_service: ReadyTally = Field(default_factory=ReadyTally)
    etcd: ReadyTally = Field(default_factory=ReadyTally)

    deployments: ReadyTally = Field(default_factory=ReadyTally)
    daemonsets: ReadyTally = Field(default_factory=ReadyTally)
    replicasets: ReadyTally = Field(default_factory=ReadyTally)
    statefulsets: ReadyTally = Field(default_factory=ReadyTally)

    jobs_count: int = Field(default=0, ge=0)
    cronjobs_count: int = Field(default=0, ge=0)
    pv_count: int = Field(default=0, ge=0)
    pvc_count: int = Field(default=0, ge=0)
    pv_bound_bytes: float = Field(default=0.0, ge=0)
    pvc_bound_bytes: float = Field(default=0.0, ge=0)

    uptime_since: datetime | None = None

    def tallies(self) -> dict[str, ReadyTally]:
        """Return every (ready, total) pair keyed by field name."""
        return {
            name: value
            for name, value in self
            if isinstance(value, ReadyTally)
        }
