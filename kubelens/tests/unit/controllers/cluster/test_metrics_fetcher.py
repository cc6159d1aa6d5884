"""Tests for the metrics.k8s.io accessor."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from kubelens.controllers.base import KubectlCommandError
from kubelens.controllers.cluster.fetchers.metrics_fetcher import KubectlMetricsAccessor
from kubelens.controllers.errors import MetricsUnavailableError

NODE_METRICS = json.dumps(
    {"items": [{"metadata": {"name": "n1"}, "usage": {"cpu": "250000000n", "memory": "1Gi"}}]}
)
POD_METRICS = json.dumps(
    {
        "items": [
            {
                "metadata": {"namespace": "shop", "name": "web"},
                "containers": [
                    {"usage": {"cpu": "100m", "memory": "100Mi"}},
                    {"usage": {"cpu": "50m", "memory": "28Mi"}},
                ],
            }
        ]
    }
)


@pytest.mark.unit
@pytest.mark.fast
class TestKubectlMetricsAccessor:
    """Tests for KubectlMetricsAccessor."""

    @pytest.fixture
    def mock_run_kubectl(self) -> AsyncMock:
        """Create mock run_kubectl function."""
        return AsyncMock()

    def test_unavailable_until_probed(self, mock_run_kubectl: AsyncMock) -> None:
        """Availability is unknown (False) before any call."""
        assert not KubectlMetricsAccessor(mock_run_kubectl).is_available()

    @pytest.mark.asyncio
    async def test_node_metrics(self, mock_run_kubectl: AsyncMock) -> None:
        """Node usage is parsed into millicores and bytes."""
        mock_run_kubectl.return_value = NODE_METRICS
        accessor = KubectlMetricsAccessor(mock_run_kubectl)

        usage = await accessor.node_metrics("n1")

        assert usage.cpu_mcores == 250
        assert usage.memory_bytes == 1024**3
        assert accessor.is_available()
        args = mock_run_kubectl.await_args_list[0].args[0]
        assert args == ("get", "--raw", "/apis/metrics.k8s.io/v1beta1/nodes")

    @pytest.mark.asyncio
    async def test_missing_node_raises(self, mock_run_kubectl: AsyncMock) -> None:
        """A node absent from the list has no metrics, backend stays available."""
        mock_run_kubectl.return_value = NODE_METRICS
        accessor = KubectlMetricsAccessor(mock_run_kubectl)
        with pytest.raises(MetricsUnavailableError):
            await accessor.node_metrics("ghost")
        assert accessor.is_available()

    @pytest.mark.asyncio
    async def test_backend_down(self, mock_run_kubectl: AsyncMock) -> None:
        """A failing list marks the backend unavailable."""
        mock_run_kubectl.side_effect = KubectlCommandError("the server could not find the requested resource")
        accessor = KubectlMetricsAccessor(mock_run_kubectl)
        with pytest.raises(MetricsUnavailableError):
            await accessor.node_metrics("n1")
        assert not accessor.is_available()
        assert not await accessor.check_available()

    @pytest.mark.asyncio
    async def test_pod_metrics_sum_containers(self, mock_run_kubectl: AsyncMock) -> None:
        """Pod usage is the sum over containers."""
        mock_run_kubectl.return_value = POD_METRICS
        accessor = KubectlMetricsAccessor(mock_run_kubectl)
        usage = await accessor.pod_metrics({"metadata": {"namespace": "shop", "name": "web"}})
        assert usage.cpu_mcores == 150
        assert usage.memory_bytes == 128 * 1024**2

    @pytest.mark.asyncio
    async def test_lookups_share_one_list(self, mock_run_kubectl: AsyncMock) -> None:
        """Per-node lookups reuse one list call inside the TTL."""
        mock_run_kubectl.return_value = NODE_METRICS
        accessor = KubectlMetricsAccessor(mock_run_kubectl, ttl_seconds=60)
        await accessor.node_metrics("n1")
        await accessor.node_metrics("n1")
        assert mock_run_kubectl.await_count == 1

    @pytest.mark.asyncio
    async def test_pod_list_failure_keeps_backend_available(
        self, mock_run_kubectl: AsyncMock
    ) -> None:
        """Only the node-metrics list decides availability, also on cache hits."""

        async def run_kubectl(args: tuple[str, ...]) -> str:
            if args[-1].endswith("/pods"):
                raise KubectlCommandError("pods.metrics.k8s.io is forbidden")
            return NODE_METRICS

        mock_run_kubectl.side_effect = run_kubectl
        accessor = KubectlMetricsAccessor(mock_run_kubectl, ttl_seconds=60)

        await accessor.node_metrics("n1")
        with pytest.raises(MetricsUnavailableError):
            await accessor.pod_metrics({"metadata": {"namespace": "shop", "name": "web"}})
        assert accessor.is_available()

        assert (await accessor.node_metrics("n1")).cpu_mcores == 250
        assert accessor.is_available()
        assert mock_run_kubectl.await_count == 2
