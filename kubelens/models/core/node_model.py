"""Node snapshot models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ResourceUsage(BaseModel):
    """Point-in-time CPU/memory usage reported by the metrics backend.

    A default instance is the zero-valued metrics object substituted when a
    lookup fails.
    """

    cpu_mcores: float = Field(default=0.0, ge=0)
    memory_bytes: float = Field(default=0.0, ge=0)


class NodeModel(BaseModel):
    """Rendered state of one cluster node, rebuilt every node cycle."""

    name: str
    status: str = "Unknown"
    created_at: datetime | None = None
    kubelet_version: str = ""
    internal_ip: str = ""
    external_ip: str = ""
    os_image: str = ""
    architecture: str = ""
    pods_count: int = Field(default=0, ge=0)
    container_images_count: int = Field(default=0, ge=0)

    allocatable_cpu_mcores: float = Field(default=0.0, ge=0)
    allocatable_memory_bytes: float = Field(default=0.0, ge=0)
    allocatable_storage_bytes: float = Field(default=0.0, ge=0)
    # Holds requested sums when the metrics backend is unavailable.
    usage_cpu_mcores: float = Field(default=0.0, ge=0)
    usage_memory_bytes: float = Field(default=0.0, ge=0)
    requested_cpu_mcores: float = Field(default=0.0, ge=0)
    requested_memory_bytes: float = Field(default=0.0, ge=0)

    is_control_plane: bool = False
    kubelet_healthy: bool = False
    runtime_healthy: bool = False
    probe_active: bool = False
    pressures: list[str] = Field(default_factory=list)

    @property
    def cpu_usage_ratio(self) -> float:
        """Usage over allocatable CPU, 0.0 when nothing is allocatable."""
        if self.allocatable_cpu_mcores <= 0:
            return 0.0
        return self.usage_cpu_mcores / self.allocatable_cpu_mcores

    @property
    def memory_usage_ratio(self) -> float:
        """Usage over allocatable memory, 0.0 when nothing is allocatable."""
        if self.allocatable_memory_bytes <= 0:
            return 0.0
        return self.usage_memory_bytes / self.allocatable_memory_bytes

    def clone(self) -> NodeModel:
        """Return an independently owned copy."""
        return self.model_copy(deep=True)
