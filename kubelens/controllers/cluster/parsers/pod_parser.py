"""Pod parser - folds raw pod objects into PodModel snapshots."""

from __future__ import annotations

from typing import Any

from kubelens.constants.values import POD_STATUS_COMPLETED, POD_STATUS_TERMINATING
from kubelens.controllers.cluster.parsers.node_parser import parse_timestamp
from kubelens.models.core.node_model import NodeModel, ResourceUsage
from kubelens.models.core.pod_model import PodModel
from kubelens.utils.resource_parser import pod_requests


def _init_container_status(pod: dict[str, Any]) -> str | None:
    """Return an Init:* status while init containers are still running."""
    status = pod.get("status", {})
    init_statuses = status.get("initContainerStatuses", []) or []
    total = len(pod.get("spec", {}).get("initContainers", []) or [])
    for index, container in enumerate(init_statuses):
        state = container.get("state", {}) or {}
        terminated = state.get("terminated")
        waiting = state.get("waiting")
        if terminated and terminated.get("exitCode", 0) == 0:
            continue
        if terminated:
            reason = terminated.get("reason") or "Error"
            return f"Init:{reason}"
        if waiting and waiting.get("reason") not in (None, "", "PodInitializing"):
            return f"Init:{waiting['reason']}"
        return f"Init:{index}/{total}"
    return None


def pod_display_status(pod: dict[str, Any]) -> str:
    """Compute a kubectl-style status string for a pod."""
    metadata = pod.get("metadata", {})
    status = pod.get("status", {})
    phase = str(status.get("phase") or "Unknown")
    reason = str(status.get("reason") or phase)

    init_reason = _init_container_status(pod)
    if init_reason is not None:
        reason = init_reason
    else:
        has_running = False
        for container in reversed(status.get("containerStatuses", []) or []):
            state = container.get("state", {}) or {}
            waiting = state.get("waiting")
            terminated = state.get("terminated")
            if waiting and waiting.get("reason"):
                reason = str(waiting["reason"])
            elif terminated:
                if terminated.get("reason"):
                    reason = str(terminated["reason"])
                elif terminated.get("signal"):
                    reason = f"Signal:{terminated['signal']}"
                else:
                    reason = f"ExitCode:{terminated.get('exitCode', 0)}"
            elif container.get("ready") and "running" in state:
                has_running = True
        if reason == POD_STATUS_COMPLETED and has_running:
            reason = "Running"

    if phase == "Succeeded" and reason == phase:
        reason = POD_STATUS_COMPLETED
    if metadata.get("deletionTimestamp"):
        reason = POD_STATUS_TERMINATING
    return reason


class PodParser:
    """Parses pod data into PodModel instances."""

    def parse_pod_model(
        self,
        pod: dict[str, Any],
        usage: ResourceUsage | None = None,
        node: NodeModel | None = None,
    ) -> PodModel:
        """Parse a single pod.

        Args:
            pod: Raw pod dictionary from API
            usage: Pod metrics; None falls back to the requested figures
            node: Model of the node the pod runs on, for allocatable context
        """
        metadata = pod.get("metadata", {})
        spec = pod.get("spec", {})
        status = pod.get("status", {})
        containers = spec.get("containers", []) or []
        container_statuses = status.get("containerStatuses", []) or []

        requested_cpu, requested_mem = pod_requests(pod)
        if usage is None:
            usage_cpu, usage_mem = requested_cpu, requested_mem
        else:
            usage_cpu, usage_mem = usage.cpu_mcores, usage.memory_bytes

        return PodModel(
            namespace=str(metadata.get("namespace", "")),
            name=str(metadata.get("name", "")),
            node=str(spec.get("nodeName") or ""),
            ready_containers=sum(1 for c in container_statuses if c.get("ready")),
            total_containers=len(containers),
            status=pod_display_status(pod),
            phase=str(status.get("phase") or "Unknown"),
            restarts=sum(max(0, int(c.get("restartCount", 0) or 0)) for c in container_statuses),
            created_at=parse_timestamp(metadata.get("creationTimestamp")),
            volumes=len(spec.get("volumes", []) or []),
            volume_mounts=sum(len(c.get("volumeMounts", []) or []) for c in containers),
            ip=str(status.get("podIP") or ""),
            requested_cpu_mcores=requested_cpu,
            requested_memory_bytes=requested_mem,
            usage_cpu_mcores=max(0.0, usage_cpu),
            usage_memory_bytes=max(0.0, usage_mem),
            node_allocatable_cpu_mcores=node.allocatable_cpu_mcores if node else 0.0,
            node_allocatable_memory_bytes=node.allocatable_memory_bytes if node else 0.0,
            labels=dict(metadata.get("labels", {}) or {}),
        )
