"""Node parser - folds raw node objects into NodeModel snapshots."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable
from contextlib import suppress
from datetime import datetime
from typing import Any

from kubelens.constants.enums import NodeStatus
from kubelens.constants.values import (
    ADDRESS_NONE,
    CONTROL_PLANE_LABELS,
    PRESSURE_CONDITIONS,
)
from kubelens.models.core.node_model import NodeModel, ResourceUsage
from kubelens.utils.resource_parser import (
    memory_str_to_bytes,
    parse_cpu_mcores,
    pod_requests,
)

_DIGITS_RE = re.compile(r"\d")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a Kubernetes RFC3339 timestamp into an aware datetime."""
    if not isinstance(value, str) or not value:
        return None
    with suppress(ValueError, TypeError):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None


def node_conditions(node: dict[str, Any]) -> dict[str, str]:
    return {
        c["type"]: c["status"]
        for c in node.get("status", {}).get("conditions", []) or []
        if "type" in c and "status" in c
    }


def node_ready_status(node: dict[str, Any]) -> str:
    """Return Ready/NotReady/Unknown from the Ready condition."""
    ready = node_conditions(node).get("Ready")
    if ready == "True":
        return NodeStatus.READY.value
    if ready == "False":
        return NodeStatus.NOT_READY.value
    return NodeStatus.UNKNOWN.value


def node_pressures(node: dict[str, Any]) -> list[str]:
    """Return the pressure conditions currently set on a node."""
    conditions = node_conditions(node)
    return [name for name in PRESSURE_CONDITIONS if conditions.get(name) == "True"]


def is_kubelet_healthy(node: dict[str, Any]) -> bool:
    """The kubelet is healthy when it reports the node Ready."""
    return node_conditions(node).get("Ready") == "True"


def is_runtime_healthy(node: dict[str, Any]) -> bool:
    """The container runtime is healthy when it reports a versioned runtime."""
    version = node.get("status", {}).get("nodeInfo", {}).get("containerRuntimeVersion", "")
    return bool(_DIGITS_RE.search(str(version or "")))


def is_control_plane(node: dict[str, Any]) -> bool:
    labels = node.get("metadata", {}).get("labels", {}) or {}
    return any(label in labels for label in CONTROL_PLANE_LABELS)


def node_address(node: dict[str, Any], address_type: str | None = None) -> str:
    """Return the first address of ``address_type`` (or the first listed one)."""
    addresses = node.get("status", {}).get("addresses", []) or []
    for addr in addresses:
        if address_type is None or addr.get("type") == address_type:
            return str(addr.get("address", "")) or ADDRESS_NONE
    return ADDRESS_NONE


def partition_pods_by_node(
    pods: Iterable[dict[str, Any]],
) -> dict[str, list[dict[str, Any]]]:
    """Group pods by the node they are scheduled on."""
    by_node: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for pod in pods:
        node_name = pod.get("spec", {}).get("nodeName")
        if node_name:
            by_node[str(node_name)].append(pod)
    return dict(by_node)


class NodeParser:
    """Parses node data into NodeModel instances."""

    def parse_node_model(
        self,
        node: dict[str, Any],
        node_pods: list[dict[str, Any]] | None = None,
        usage: ResourceUsage | None = None,
        *,
        metrics_available: bool = True,
        probe_active: bool = False,
    ) -> NodeModel:
        """Parse a single node into a NodeModel.

        Args:
            node: Raw node dictionary from API
            node_pods: Pods scheduled on this node
            usage: Node metrics, None when the lookup failed
            metrics_available: Whether the metrics backend is reachable at all.
                When it is not, usage carries the summed pod requests.
            probe_active: Whether the remote probe reported the service active

        Returns:
            NodeModel object.
        """
        node_pods = node_pods or []
        metadata = node.get("metadata", {})
        status = node.get("status", {})
        spec = node.get("spec", {})
        node_info = status.get("nodeInfo", {})
        allocatable = status.get("allocatable", {})

        requested_cpu = 0.0
        requested_mem = 0.0
        for pod in node_pods:
            cpu, mem = pod_requests(pod)
            requested_cpu += cpu
            requested_mem += mem

        if metrics_available:
            effective = usage or ResourceUsage()
            usage_cpu, usage_mem = effective.cpu_mcores, effective.memory_bytes
        else:
            usage_cpu, usage_mem = requested_cpu, requested_mem

        ready_status = node_ready_status(node)
        if spec.get("unschedulable"):
            ready_status = f"{ready_status},SchedulingDisabled"

        return NodeModel(
            name=str(metadata.get("name", "")),
            status=ready_status,
            created_at=parse_timestamp(metadata.get("creationTimestamp")),
            kubelet_version=str(node_info.get("kubeletVersion", "")),
            internal_ip=node_address(node, "InternalIP"),
            external_ip=node_address(node, "ExternalIP"),
            os_image=str(node_info.get("osImage", "")),
            architecture=str(node_info.get("architecture", "")),
            pods_count=len(node_pods),
            container_images_count=len(status.get("images", []) or []),
            allocatable_cpu_mcores=parse_cpu_mcores(allocatable.get("cpu", "0")),
            allocatable_memory_bytes=memory_str_to_bytes(allocatable.get("memory", "0")),
            allocatable_storage_bytes=memory_str_to_bytes(
                allocatable.get("ephemeral-storage", "0")
            ),
            usage_cpu_mcores=max(0.0, usage_cpu),
            usage_memory_bytes=max(0.0, usage_mem),
            requested_cpu_mcores=requested_cpu,
            requested_memory_bytes=requested_mem,
            is_control_plane=is_control_plane(node),
            kubelet_healthy=is_kubelet_healthy(node),
            runtime_healthy=is_runtime_healthy(node),
            probe_active=probe_active,
            pressures=node_pressures(node),
        )
