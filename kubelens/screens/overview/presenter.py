"""Overview screen presenter - view state and cell formatting."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from rich.text import Text

from kubelens.constants.enums import NodeSortField, NodeStatus, PodSortField
from kubelens.constants.limits import BAR_GRAPH_WIDTH, SUMMARY_BAR_GRAPH_WIDTH
from kubelens.models.cache.snapshot_store import SnapshotDiff
from kubelens.models.core.cluster_summary import ClusterSummary, ReadyTally
from kubelens.models.core.node_model import NodeModel
from kubelens.models.core.pod_model import PodModel
from kubelens.screens.overview.config import NODE_SORT_ORDER, POD_SORT_ORDER
from kubelens.utils.resource_parser import bytes_to_gib

logger = logging.getLogger(__name__)

_RATIO_WARN = 0.7
_RATIO_CRIT = 0.9


def get_ratio(used: float, total: float) -> float:
    """Return ``used / total``, 0.0 when nothing is available."""
    if total <= 0:
        return 0.0
    return used / total


def bar_graph(width: int, ratio: float) -> str:
    """Render a fixed-width text bar filled to ``ratio`` (clamped to [0, 1])."""
    width = max(0, width)
    filled = round(min(max(ratio, 0.0), 1.0) * width)
    return "|" * filled + " " * (width - filled)


def ratio_style(ratio: float) -> str:
    if ratio >= _RATIO_CRIT:
        return "red"
    if ratio >= _RATIO_WARN:
        return "yellow"
    return "green"


def format_age(created_at: datetime | None, now: datetime | None = None) -> str:
    """Format the time since ``created_at`` the way kubectl does (``3d4h``, ``12m``)."""
    if created_at is None:
        return "<unknown>"
    now = now or datetime.now(timezone.utc)
    seconds = max(0, int((now - created_at).total_seconds()))
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days >= 10:
        return f"{days}d"
    if days:
        return f"{days}d{hours}h" if hours else f"{days}d"
    if hours:
        return f"{hours}h{minutes}m" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}m"
    return f"{secs}s"


def format_cpu(mcores: float) -> str:
    return f"{int(round(mcores))}m"


def format_gib(value_bytes: float, precision: int = 1) -> str:
    return f"{bytes_to_gib(value_bytes):.{precision}f}Gi"


def usage_cell(
    used: float,
    total: float,
    *,
    memory: bool = False,
    width: int = BAR_GRAPH_WIDTH,
) -> Text:
    """Render ``[bar] used/total (pct%)`` colored by the usage ratio."""
    ratio = get_ratio(used, total)
    fmt = format_gib if memory else format_cpu
    text = Text("[")
    text.append(bar_graph(width, ratio), style=ratio_style(ratio))
    text.append(f"] {fmt(used)}/{fmt(total)} ({ratio * 100:.1f}%)")
    return text


def tally_text(label: str, tally: ReadyTally, suffix: str = "") -> Text:
    """Render ``Label: ready/total`` with the ready count colored by health."""
    text = Text(f"{label}: ")
    text.append(str(tally.ready), style="green" if tally.all_ready else "red")
    text.append(f"/{tally.total}{suffix}")
    return text


class OverviewPresenter:
    """Holds the overview view state and turns snapshots into table rows."""

    def __init__(
        self,
        *,
        probe_service: str = "",
        node_sort_field: NodeSortField = NodeSortField.NAME,
        pod_sort_field: PodSortField = PodSortField.NAMESPACE,
        show_nodes: bool = True,
        show_pods: bool = True,
    ) -> None:
        self.probe_service = probe_service
        self.node_sort_field = node_sort_field
        self.pod_sort_field = pod_sort_field
        self.show_nodes = show_nodes
        self.show_pods = show_pods
        self.metrics_available = False

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def toggle_nodes(self) -> bool:
        self.show_nodes = not self.show_nodes
        return self.show_nodes

    def toggle_pods(self) -> bool:
        self.show_pods = not self.show_pods
        return self.show_pods

    def next_node_sort_field(self) -> NodeSortField:
        index = NODE_SORT_ORDER.index(self.node_sort_field)
        self.node_sort_field = NODE_SORT_ORDER[(index + 1) % len(NODE_SORT_ORDER)]
        return self.node_sort_field

    def next_pod_sort_field(self) -> PodSortField:
        index = POD_SORT_ORDER.index(self.pod_sort_field)
        self.pod_sort_field = POD_SORT_ORDER[(index + 1) % len(POD_SORT_ORDER)]
        return self.pod_sort_field

    @property
    def usage_basis(self) -> str:
        """Label for CPU/memory figures: measured usage or summed requests."""
        return "used" if self.metrics_available else "requested"

    @property
    def metrics_label(self) -> str:
        return "connected" if self.metrics_available else "not connected"

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def node_row(self, node: NodeModel, now: datetime | None = None) -> tuple[Any, ...]:
        status_style = "green" if node.status == NodeStatus.READY.value else "red"
        marker = "*" if node.is_control_plane else ""
        return (
            marker,
            node.name,
            Text(node.status, style=status_style),
            format_age(node.created_at, now),
            node.kubelet_version,
            f"{node.internal_ip}/{node.external_ip}",
            f"{node.os_image}/{node.architecture}",
            f"{node.pods_count}/{node.container_images_count}",
            format_gib(node.allocatable_storage_bytes, 2),
            usage_cell(node.usage_cpu_mcores, node.allocatable_cpu_mcores),
            usage_cell(
                node.usage_memory_bytes, node.allocatable_memory_bytes, memory=True
            ),
        )

    def pod_row(self, pod: PodModel, now: datetime | None = None) -> tuple[Any, ...]:
        ready_style = "green" if pod.is_fully_ready else "yellow"
        return (
            pod.namespace,
            pod.name,
            Text(f"{pod.ready_containers}/{pod.total_containers}", style=ready_style),
            pod.status,
            str(pod.restarts),
            format_age(pod.created_at, now),
            f"{pod.volumes}/{pod.volume_mounts}",
            pod.ip,
            pod.node,
            usage_cell(pod.usage_cpu_mcores, pod.node_allocatable_cpu_mcores),
            usage_cell(
                pod.usage_memory_bytes, pod.node_allocatable_memory_bytes, memory=True
            ),
        )

    def diff_rows(self, diff: SnapshotDiff) -> list[tuple[Any, ...]]:
        rows: list[tuple[Any, ...]] = []
        for pod in diff.added:
            rows.append((Text("+", style="green"), pod.namespace, pod.name, pod.status, pod.node))
        for pod in diff.removed:
            rows.append((Text("-", style="red"), pod.namespace, pod.name, pod.status, pod.node))
        return rows

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def summary_lines(self, summary: ClusterSummary) -> list[Text]:
        """Render the summary header, one Text per line."""
        if self.metrics_available:
            cpu_used, mem_used = summary.usage_cpu_mcores, summary.usage_memory_bytes
        else:
            cpu_used, mem_used = summary.requested_cpu_mcores, summary.requested_memory_bytes

        probe_label = self.probe_service or "Probe"
        pods = Text("Pods: ")
        pods.append(
            str(summary.pods_running),
            style="green" if summary.pods_running == summary.pods_available else "red",
        )
        pods.append(f"/{summary.pods_available} ({summary.images_count} imgs)")

        health = Text("  ").join(
            [
                tally_text("Nodes", summary.nodes),
                pods,
                tally_text("Kubelet", summary.kubelet),
                tally_text("Runtime", summary.container_runtime),
                tally_text(probe_label.capitalize(), summary.probe_service),
                tally_text("etcd", summary.etcd),
            ]
        )
        workloads = Text("  ").join(
            [
                Text(f"Namespaces: {summary.namespaces}"),
                tally_text("Deployments", summary.deployments),
                tally_text("DaemonSets", summary.daemonsets),
                tally_text("ReplicaSets", summary.replicasets),
                tally_text("StatefulSets", summary.statefulsets),
                Text(f"Jobs: {summary.jobs_count}"),
                Text(f"CronJobs: {summary.cronjobs_count}"),
            ]
        )
        storage = Text(
            f"PVs: {summary.pv_count} ({format_gib(summary.pv_bound_bytes)} bound)  "
            f"PVCs: {summary.pvc_count} ({format_gib(summary.pvc_bound_bytes)} bound)  "
            f"Volumes in use: {summary.volumes_in_use}  "
            f"Pressures: {summary.pressures}  "
            f"Uptime: {format_age(summary.uptime_since)}"
        )
        cpu = Text(f"CPU ({self.usage_basis}): ").append_text(
            usage_cell(cpu_used, summary.allocatable_cpu_mcores, width=SUMMARY_BAR_GRAPH_WIDTH)
        )
        memory = Text(f"Memory ({self.usage_basis}): ").append_text(
            usage_cell(
                mem_used,
                summary.allocatable_memory_bytes,
                memory=True,
                width=SUMMARY_BAR_GRAPH_WIDTH,
            )
        )
        metrics = Text("Metrics: ")
        metrics.append(
            self.metrics_label, style="white" if self.metrics_available else "red"
        )
        return [health, workloads, storage, cpu, memory, metrics]
