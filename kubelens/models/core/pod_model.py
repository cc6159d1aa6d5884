"""Pod snapshot model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from kubelens.constants.values import POD_STATUS_COMPLETED


class PodModel(BaseModel):
    """Rendered state of one pod, rebuilt every pod refresh."""

    namespace: str
    name: str
    node: str = ""
    ready_containers: int = Field(default=0, ge=0)
    total_containers: int = Field(default=0, ge=0)
    status: str = "Unknown"
    phase: str = "Unknown"
    restarts: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    volumes: int = Field(default=0, ge=0)
    volume_mounts: int = Field(default=0, ge=0)
    ip: str = ""

    requested_cpu_mcores: float = Field(default=0.0, ge=0)
    requested_memory_bytes: float = Field(default=0.0, ge=0)
    # Falls back to the requested figures when pod metrics are absent.
    usage_cpu_mcores: float = Field(default=0.0, ge=0)
    usage_memory_bytes: float = Field(default=0.0, ge=0)

    node_allocatable_cpu_mcores: float = Field(default=0.0, ge=0)
    node_allocatable_memory_bytes: float = Field(default=0.0, ge=0)

    labels: dict[str, str] = Field(default_factory=dict)

    @property
    def identity(self) -> tuple[str, str]:
        """Namespace-qualified pod identity."""
        return (self.namespace, self.name)

    @property
    def is_completed(self) -> bool:
        return self.status == POD_STATUS_COMPLETED

    @property
    def is_fully_ready(self) -> bool:
        return self.ready_containers == self.total_containers

    def clone(self) -> PodModel:
        """Return an independently owned copy."""
        return self.model_copy(deep=True)
