"""Metrics accessor - best-effort node and pod usage from metrics.k8s.io."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from kubelens.constants.timeouts import METRICS_CACHE_TTL
from kubelens.controllers.base import KubectlRunner
from kubelens.controllers.errors import MetricsUnavailableError
from kubelens.models.cache.data_cache import DataCache
from kubelens.models.core.node_model import ResourceUsage
from kubelens.utils.resource_parser import memory_str_to_bytes, parse_cpu_mcores

logger = logging.getLogger(__name__)


class MetricsAccessor(Protocol):
    """Best-effort usage lookups; a missing backend raises MetricsUnavailableError."""

    async def node_metrics(self, name: str) -> ResourceUsage: ...

    async def pod_metrics(self, pod: dict[str, Any]) -> ResourceUsage: ...

    def is_available(self) -> bool: ...


def _usage_from(raw_usage: dict[str, Any] | None) -> ResourceUsage:
    raw_usage = raw_usage or {}
    return ResourceUsage(
        cpu_mcores=parse_cpu_mcores(raw_usage.get("cpu", "0")),
        memory_bytes=memory_str_to_bytes(raw_usage.get("memory", "0")),
    )


class KubectlMetricsAccessor:
    """Reads NodeMetrics/PodMetrics lists through ``kubectl get --raw``.

    One list call per kind is shared by all per-object lookups inside the
    cache TTL window. Availability is the outcome of the latest node-metrics
    list call; a failing pod-metrics list only degrades pod usage.
    """

    _NODES_PATH = "/apis/metrics.k8s.io/v1beta1/nodes"
    _PODS_PATH = "/apis/metrics.k8s.io/v1beta1/pods"

    def __init__(
        self,
        run_kubectl_func: KubectlRunner,
        *,
        ttl_seconds: float = METRICS_CACHE_TTL,
    ) -> None:
        self._run_kubectl = run_kubectl_func
        self._cache = DataCache(ttl_seconds)
        self._available: bool | None = None

    def is_available(self) -> bool:
        """Return the last observed backend availability (False until probed)."""
        return bool(self._available)

    async def check_available(self) -> bool:
        """Probe the backend by listing node metrics."""
        try:
            await self._node_usage_by_name()
        except MetricsUnavailableError:
            return False
        return True

    async def _fetch_raw(
        self, path: str, *, tracks_availability: bool = False
    ) -> list[dict[str, Any]]:
        try:
            output = await self._run_kubectl(("get", "--raw", path))
            data = json.loads(output) if output else {}
        except Exception as exc:
            message = str(exc).strip() or "metrics unavailable"
            if tracks_availability:
                if self._available is not False:
                    logger.info("Metrics backend unavailable: %s", message)
                self._available = False
            else:
                logger.debug("Metrics list %s failed: %s", path, message)
            raise MetricsUnavailableError(message) from exc

        if tracks_availability:
            self._available = True
        items = data.get("items", []) if isinstance(data, dict) else []
        return [item for item in items if isinstance(item, dict)]

    async def _node_usage_by_name(self) -> dict[str, ResourceUsage]:
        async def _load() -> dict[str, ResourceUsage]:
            items = await self._fetch_raw(self._NODES_PATH, tracks_availability=True)
            return {
                str(item.get("metadata", {}).get("name", "")): _usage_from(item.get("usage"))
                for item in items
            }

        return await self._cache.get_or_load("nodes", _load)

    async def _pod_usage_by_key(self) -> dict[tuple[str, str], ResourceUsage]:
        async def _load() -> dict[tuple[str, str], ResourceUsage]:
            items = await self._fetch_raw(self._PODS_PATH)
            lookup: dict[tuple[str, str], ResourceUsage] = {}
            for item in items:
                metadata = item.get("metadata", {})
                cpu = 0.0
                memory = 0.0
                for container in item.get("containers", []) or []:
                    usage = _usage_from(container.get("usage"))
                    cpu += usage.cpu_mcores
                    memory += usage.memory_bytes
                key = (str(metadata.get("namespace", "")), str(metadata.get("name", "")))
                lookup[key] = ResourceUsage(cpu_mcores=cpu, memory_bytes=memory)
            return lookup

        return await self._cache.get_or_load("pods", _load)

    async def node_metrics(self, name: str) -> ResourceUsage:
        usage = (await self._node_usage_by_name()).get(name)
        if usage is None:
            raise MetricsUnavailableError(f"no metrics for node {name}")
        return usage.model_copy()

    async def pod_metrics(self, pod: dict[str, Any]) -> ResourceUsage:
        metadata = pod.get("metadata", {})
        key = (str(metadata.get("namespace", "")), str(metadata.get("name", "")))
        usage = (await self._pod_usage_by_key()).get(key)
        if usage is None:
            raise MetricsUnavailableError(f"no metrics for pod {key[0]}/{key[1]}")
        return usage.model_copy()
