"""Tests for the cluster summary fold."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from kubelens.constants.enums import ProbeState
from kubelens.controllers.cluster.parsers.summary_parser import SummaryInputs, SummaryParser
from kubelens.models.core.cluster_summary import ReadyTally
from kubelens.models.core.node_model import ResourceUsage


@pytest.mark.unit
@pytest.mark.fast
class TestSummaryParser:
    """Tests for SummaryParser.parse_summary."""

    @pytest.fixture
    def parser(self) -> SummaryParser:
        return SummaryParser()

    def test_empty_cluster(self, parser) -> None:
        """No objects give an all-zero summary."""
        summary = parser.parse_summary(SummaryInputs())
        assert summary.nodes == ReadyTally()
        assert summary.pods_available == 0

    def test_node_tallies(self, parser, make_node) -> None:
        """Node, kubelet, runtime and probe tallies count per node."""
        inputs = SummaryInputs(
            nodes=[
                make_node("a"),
                make_node("b", ready="False", runtime=""),
                make_node("c", pressures=("MemoryPressure",), images=2),
            ]
        )
        summary = parser.parse_summary(
            inputs,
            probe_states={"a": ProbeState.ACTIVE, "b": ProbeState.FAILED},
        )
        assert summary.nodes == ReadyTally(ready=2, total=3)
        assert summary.kubelet == ReadyTally(ready=2, total=3)
        assert summary.container_runtime == ReadyTally(ready=2, total=3)
        assert summary.probe_service == ReadyTally(ready=1, total=3)
        assert summary.pressures == 1
        assert summary.images_count == 2
        assert summary.allocatable_cpu_mcores == 12000

    def test_node_usage_missing_counts_zero(self, parser, make_node) -> None:
        """Nodes without metrics contribute zero usage."""
        inputs = SummaryInputs(nodes=[make_node("a"), make_node("b")])
        summary = parser.parse_summary(inputs, {"a": ResourceUsage(cpu_mcores=500, memory_bytes=10)})
        assert summary.usage_cpu_mcores == 500
        assert summary.usage_memory_bytes == 10

    def test_uptime_is_earliest_node(self, parser, make_node) -> None:
        """Uptime starts at the oldest node's creation."""
        inputs = SummaryInputs(
            nodes=[
                make_node("new", created="2024-05-01T00:00:00Z"),
                make_node("old", created="2023-05-01T00:00:00Z"),
            ]
        )
        summary = parser.parse_summary(inputs, now=datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert summary.uptime_since == datetime(2023, 5, 1, tzinfo=timezone.utc)

    def test_pods_skip_completed(self, parser, make_pod) -> None:
        """Completed pods are excluded from availability and requests."""
        inputs = SummaryInputs(
            pods=[
                make_pod("run", cpu="100m"),
                make_pod("unready", cpu="100m", ready=False),
                make_pod("done", phase="Succeeded", cpu="900m"),
            ]
        )
        summary = parser.parse_summary(inputs)
        assert summary.pods_available == 2
        assert summary.pods_running == 1
        assert summary.requested_cpu_mcores == 200

    def test_etcd_tally(self, parser, make_pod) -> None:
        """etcd pods are found by the component label."""
        inputs = SummaryInputs(
            pods=[
                make_pod("etcd-1", namespace="kube-system", labels={"component": "etcd"}),
                make_pod(
                    "etcd-2",
                    namespace="kube-system",
                    phase="Pending",
                    labels={"component": "etcd"},
                ),
                make_pod("api", namespace="kube-system", labels={"component": "kube-apiserver"}),
            ]
        )
        assert parser.parse_summary(inputs).etcd == ReadyTally(ready=1, total=2)

    def test_workload_tallies(self, parser) -> None:
        """Controllers report ready against desired replicas."""
        inputs = SummaryInputs(
            namespaces=[{}, {}],
            deployments=[
                {"status": {"replicas": 3, "readyReplicas": 2}},
                {"status": {"replicas": 1}},
            ],
            daemonsets=[{"status": {"desiredNumberScheduled": 4, "numberReady": 4}}],
            replicasets=[{"status": {"replicas": 2, "readyReplicas": 5}}],
            statefulsets=[{"spec": {"replicas": 3}, "status": {"readyReplicas": 1}}],
            jobs=[{}, {}, {}],
            cronjobs=[{}],
        )
        summary = parser.parse_summary(inputs)
        assert summary.namespaces == 2
        assert summary.deployments == ReadyTally(ready=2, total=4)
        assert summary.daemonsets == ReadyTally(ready=4, total=4)
        assert summary.replicasets == ReadyTally(ready=2, total=2)
        assert summary.statefulsets == ReadyTally(ready=1, total=3)
        assert summary.jobs_count == 3
        assert summary.cronjobs_count == 1

    def test_volumes(self, parser) -> None:
        """Only bound volumes and claims add capacity."""
        inputs = SummaryInputs(
            persistent_volumes=[
                {"spec": {"capacity": {"storage": "10Gi"}}, "status": {"phase": "Bound"}},
                {"spec": {"capacity": {"storage": "5Gi"}}, "status": {"phase": "Available"}},
            ],
            persistent_volume_claims=[
                {
                    "spec": {"resources": {"requests": {"storage": "1Gi"}}},
                    "status": {"phase": "Bound"},
                },
            ],
        )
        summary = parser.parse_summary(inputs)
        assert summary.pv_count == 2
        assert summary.pv_bound_bytes == 10 * 1024**3
        assert summary.pvc_count == 1
        assert summary.pvc_bound_bytes == 1024**3

    def test_ready_never_exceeds_total(self, parser, make_node, make_pod) -> None:
        """Every tally keeps ready within total."""
        inputs = SummaryInputs(
            nodes=[make_node("a")],
            pods=[make_pod("p")],
            deployments=[{"status": {"replicas": 0, "readyReplicas": 3}}],
        )
        summary = parser.parse_summary(inputs)
        for tally in summary.tallies().values():
            assert tally.ready <= tally.total
