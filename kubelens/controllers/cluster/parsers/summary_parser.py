"""Summary parser - folds every listed resource kind into one ClusterSummary."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from kubelens.constants.enums import NodeStatus, ProbeState
from kubelens.constants.values import (
    ETCD_COMPONENT_LABEL,
    ETCD_COMPONENT_VALUE,
    POD_STATUS_COMPLETED,
)
from kubelens.controllers.cluster.parsers.node_parser import (
    is_kubelet_healthy,
    is_runtime_healthy,
    node_pressures,
    node_ready_status,
    parse_timestamp,
)
from kubelens.controllers.cluster.parsers.pod_parser import pod_display_status
from kubelens.models.core.cluster_summary import ClusterSummary, ReadyTally
from kubelens.models.core.node_model import ResourceUsage
from kubelens.utils.resource_parser import (
    memory_str_to_bytes,
    parse_cpu_mcores,
    pod_requests,
)

RawObject = dict[str, Any]


def _int(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


@dataclass
class SummaryInputs:
    """Everything one summary cycle read from the data sources."""

    namespaces: list[RawObject] = field(default_factory=list)
    nodes: list[RawObject] = field(default_factory=list)
    pods: list[RawObject] = field(default_factory=list)
    deployments: list[RawObject] = field(default_factory=list)
    daemonsets: list[RawObject] = field(default_factory=list)
    replicasets: list[RawObject] = field(default_factory=list)
    statefulsets: list[RawObject] = field(default_factory=list)
    jobs: list[RawObject] = field(default_factory=list)
    cronjobs: list[RawObject] = field(default_factory=list)
    persistent_volumes: list[RawObject] = field(default_factory=list)
    persistent_volume_claims: list[RawObject] = field(default_factory=list)


class SummaryParser:
    """Builds a ClusterSummary from raw objects, node metrics and probe results."""

    def parse_summary(
        self,
        inputs: SummaryInputs,
        node_usage: Mapping[str, ResourceUsage] | None = None,
        probe_states: Mapping[str, ProbeState] | None = None,
        *,
        now: datetime | None = None,
    ) -> ClusterSummary:
        """Fold one cycle's reads into a summary.

        Args:
            inputs: Raw object lists
            node_usage: Node name to metrics; missing nodes count as zero usage
            probe_states: Node name to remote probe result
            now: Upper bound for the uptime timestamp when no node has one
        """
        node_usage = node_usage or {}
        probe_states = probe_states or {}
        summary = ClusterSummary(namespaces=len(inputs.namespaces), uptime_since=now)

        self._fold_nodes(summary, inputs.nodes, node_usage, probe_states)
        self._fold_pods(summary, inputs.pods)
        self._fold_workloads(summary, inputs)
        self._fold_volumes(summary, inputs)
        return summary

    def _fold_nodes(
        self,
        summary: ClusterSummary,
        nodes: list[RawObject],
        node_usage: Mapping[str, ResourceUsage],
        probe_states: Mapping[str, ProbeState],
    ) -> None:
        ready = kubelet_ready = runtime_ready = probe_ready = 0
        for node in nodes:
            metadata = node.get("metadata", {})
            status = node.get("status", {})
            name = str(metadata.get("name", ""))

            if node_ready_status(node) == NodeStatus.READY.value:
                ready += 1
            created = parse_timestamp(metadata.get("creationTimestamp"))
            if created is not None and (
                summary.uptime_since is None or created < summary.uptime_since
            ):
                summary.uptime_since = created

            summary.pressures += len(node_pressures(node))
            summary.images_count += len(status.get("images", []) or [])
            summary.volumes_in_use += len(status.get("volumesInUse", []) or [])

            allocatable = status.get("allocatable", {})
            summary.allocatable_cpu_mcores += parse_cpu_mcores(allocatable.get("cpu", "0"))
            summary.allocatable_memory_bytes += memory_str_to_bytes(
                allocatable.get("memory", "0")
            )
            usage = node_usage.get(name) or ResourceUsage()
            summary.usage_cpu_mcores += usage.cpu_mcores
            summary.usage_memory_bytes += usage.memory_bytes

            if is_kubelet_healthy(node):
                kubelet_ready += 1
            if is_runtime_healthy(node):
                runtime_ready += 1
            if probe_states.get(name) == ProbeState.ACTIVE:
                probe_ready += 1

        total = len(nodes)
        summary.nodes = ReadyTally.of(ready, total)
        summary.kubelet = ReadyTally.of(kubelet_ready, total)
        summary.container_runtime = ReadyTally.of(runtime_ready, total)
        summary.probe_service = ReadyTally.of(probe_ready, total)

    def _fold_pods(self, summary: ClusterSummary, pods: list[RawObject]) -> None:
        etcd_ready = etcd_total = 0
        for pod in pods:
            if pod_display_status(pod) == POD_STATUS_COMPLETED:
                continue
            status = pod.get("status", {})
            phase = status.get("phase")
            summary.pods_available += 1

            container_statuses = status.get("containerStatuses", []) or []
            total_containers = len(pod.get("spec", {}).get("containers", []) or [])
            ready_containers = sum(1 for c in container_statuses if c.get("ready"))
            if phase == "Running" and ready_containers == total_containers:
                summary.pods_running += 1

            cpu, mem = pod_requests(pod)
            summary.requested_cpu_mcores += cpu
            summary.requested_memory_bytes += mem

            labels = pod.get("metadata", {}).get("labels", {}) or {}
            if labels.get(ETCD_COMPONENT_LABEL) == ETCD_COMPONENT_VALUE:
                etcd_total += 1
                if phase == "Running":
                    etcd_ready += 1
        summary.etcd = ReadyTally.of(etcd_ready, etcd_total)

    def _fold_workloads(self, summary: ClusterSummary, inputs: SummaryInputs) -> None:
        summary.deployments = self._tally(
            inputs.deployments,
            lambda d: _int(d.get("status", {}).get("readyReplicas")),
            lambda d: _int(d.get("status", {}).get("replicas")),
        )
        summary.daemonsets = self._tally(
            inputs.daemonsets,
            lambda d: _int(d.get("status", {}).get("numberReady")),
            lambda d: _int(d.get("status", {}).get("desiredNumberScheduled")),
        )
        summary.replicasets = self._tally(
            inputs.replicasets,
            lambda r: _int(r.get("status", {}).get("readyReplicas")),
            lambda r: _int(r.get("status", {}).get("replicas")),
        )
        summary.statefulsets = self._tally(
            inputs.statefulsets,
            lambda s: _int(s.get("status", {}).get("readyReplicas")),
            lambda s: _int(s.get("spec", {}).get("replicas", 1)),
        )
        summary.jobs_count = len(inputs.jobs)
        summary.cronjobs_count = len(inputs.cronjobs)

    @staticmethod
    def _tally(items: list[RawObject], ready_of: Any, total_of: Any) -> ReadyTally:
        ready = total = 0
        for item in items:
            item_total = total_of(item)
            # Per-object clamp keeps one over-reporting controller from masking another.
            ready += min(ready_of(item), item_total)
            total += item_total
        return ReadyTally.of(ready, total)

    def _fold_volumes(self, summary: ClusterSummary, inputs: SummaryInputs) -> None:
        summary.pv_count = len(inputs.persistent_volumes)
        for pv in inputs.persistent_volumes:
            if pv.get("status", {}).get("phase") == "Bound":
                summary.pv_bound_bytes += memory_str_to_bytes(
                    pv.get("spec", {}).get("capacity", {}).get("storage", "0")
                )

        summary.pvc_count = len(inputs.persistent_volume_claims)
        for pvc in inputs.persistent_volume_claims:
            if pvc.get("status", {}).get("phase") == "Bound":
                requests = pvc.get("spec", {}).get("resources", {}).get("requests", {})
                summary.pvc_bound_bytes += memory_str_to_bytes(requests.get("storage", "0"))
