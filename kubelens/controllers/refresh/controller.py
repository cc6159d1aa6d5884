"""Refresh controller - the periodic node and summary cycles.

The controller owns two independent asyncio tasks. Each cycle reads the
object cache, fans out host probes per node, folds the results into snapshot
models and hands them to the registered callbacks. A cycle that cannot read
its inputs is skipped and retried on the next tick; the previous snapshot
stays on screen.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any

from kubelens.constants.defaults import (
    AUTHORIZATION_VERBS,
    AUTHORIZED_RESOURCES_DEFAULT,
    PROBE_MAX_CONCURRENCY_DEFAULT,
    PROBE_SERVICE_DEFAULT,
)
from kubelens.constants.enums import (
    FetchState,
    NodeSortField,
    PodSortField,
    ProbeState,
    RefreshCycle,
)
from kubelens.constants.timeouts import AUTHZ_COMMAND_TIMEOUT, CYCLE_SHUTDOWN_TIMEOUT
from kubelens.controllers.base import BaseController, KubectlController
from kubelens.controllers.cluster.fetchers import (
    Authorizer,
    KubectlAuthorizer,
    KubectlMetricsAccessor,
    KubectlObjectCache,
    MetricsAccessor,
    ObjectCache,
    RawObject,
)
from kubelens.controllers.cluster.parsers import (
    NodeParser,
    PodParser,
    SummaryInputs,
    SummaryParser,
    node_address,
    partition_pods_by_node,
)
from kubelens.controllers.cluster.probes import HostProber
from kubelens.controllers.errors import (
    AuthorizationDeniedError,
    KubeLensError,
    MetricsUnavailableError,
    RefreshControllerError,
)
from kubelens.models.cache.snapshot_store import (
    RetainedSnapshot,
    SnapshotDiff,
    SnapshotStore,
    copy_pods,
)
from kubelens.models.core.cluster_summary import ClusterSummary
from kubelens.models.core.node_model import NodeModel, ResourceUsage
from kubelens.models.core.pod_model import PodModel
from kubelens.models.state.app_settings import AppSettings
from kubelens.utils.concurrent_map import concurrent_map
from kubelens.utils.model_sorter import sort_nodes, sort_pods

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[Any], Any]


def _pod_key(pod: RawObject) -> tuple[str, str]:
    metadata = pod.get("metadata", {})
    return (str(metadata.get("namespace", "")), str(metadata.get("name", "")))


class RefreshController(BaseController):
    """Drives the node and summary refresh cycles.

    Callbacks may be plain functions or coroutine functions and are invoked
    exactly once per successful cycle, after every probe has finished.
    """

    SOURCE_NODES = RefreshCycle.NODES.value
    SOURCE_SUMMARY = RefreshCycle.SUMMARY.value
    _NODE_RESOURCE = "nodes"

    def __init__(
        self,
        object_cache: ObjectCache,
        metrics: MetricsAccessor,
        authorizer: Authorizer,
        prober: HostProber,
        *,
        probe_service: str = PROBE_SERVICE_DEFAULT,
        probe_max_concurrency: int | None = PROBE_MAX_CONCURRENCY_DEFAULT,
        authorized_resources: Iterable[str] = AUTHORIZED_RESOURCES_DEFAULT,
        snapshot_store: SnapshotStore | None = None,
        node_sort_field: NodeSortField | str = NodeSortField.NAME,
        pod_sort_field: PodSortField | str = PodSortField.NAMESPACE,
        context: str | None = None,
    ) -> None:
        super().__init__()
        self.context = context
        self._objects = object_cache
        self._metrics = metrics
        self._authorizer = authorizer
        self._prober = prober
        self._probe_service = probe_service
        self._probe_limit = probe_max_concurrency
        self._authorized_resources = tuple(authorized_resources)
        self._snapshot_store = snapshot_store or SnapshotStore()

        self._node_parser = NodeParser()
        self._pod_parser = PodParser()
        self._summary_parser = SummaryParser()

        self._node_sort_field: NodeSortField | str = node_sort_field
        self._node_sort_descending = False
        self._pod_sort_field: PodSortField | str = pod_sort_field
        self._pod_sort_descending = False

        self._node_refresh_func: RefreshCallback | None = None
        self._pod_refresh_func: RefreshCallback | None = None
        self._summary_refresh_func: RefreshCallback | None = None

        self._stop_event = asyncio.Event()
        self._tasks: list[asyncio.Task[None]] = []
        self._started = False

        self._nodes: list[NodeModel] = []
        self._pods: list[PodModel] = []
        self._summary: ClusterSummary | None = None
        self._last_node_update: datetime | None = None
        self._last_summary_update: datetime | None = None
        self._metrics_basis: bool | None = None

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        snapshot_store: SnapshotStore | None = None,
    ) -> RefreshController:
        """Build a controller wired to kubectl and ssh from user settings."""
        kubectl = KubectlController(settings.context)
        authz_kubectl = KubectlController(
            settings.context, command_timeout=AUTHZ_COMMAND_TIMEOUT
        )
        return cls(
            KubectlObjectCache(kubectl.run_kubectl, namespace=settings.namespace),
            KubectlMetricsAccessor(kubectl.run_kubectl),
            KubectlAuthorizer(authz_kubectl.run_kubectl),
            HostProber(
                ssh_binary=settings.probe_ssh_binary,
                user=settings.probe_user,
                use_sudo=settings.probe_use_sudo,
                timeout_seconds=settings.probe_timeout_seconds,
            ),
            probe_service=settings.probe_service,
            probe_max_concurrency=settings.probe_max_concurrency,
            authorized_resources=settings.authorized_resources,
            snapshot_store=snapshot_store,
            node_sort_field=settings.node_sort_field,
            pod_sort_field=settings.pod_sort_field,
            context=settings.context,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _check_not_started(self) -> None:
        if self._started:
            raise RefreshControllerError("callbacks must be registered before start()")

    def set_node_refresh_func(self, func: RefreshCallback | None) -> None:
        self._check_not_started()
        self._node_refresh_func = func

    def set_pod_refresh_func(self, func: RefreshCallback | None) -> None:
        self._check_not_started()
        self._pod_refresh_func = func

    def set_summary_refresh_func(self, func: RefreshCallback | None) -> None:
        self._check_not_started()
        self._summary_refresh_func = func

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._started and not self._stop_event.is_set()

    async def start(self, interval: float) -> None:
        """Authorize the caller and launch both cycles.

        Raises:
            AuthorizationDeniedError: The user may not read a configured resource.
                No cycle is started.
            AuthorizationCheckError: The startup check itself could not run.
            RefreshControllerError: Already started, or a non-positive interval.
        """
        if self._started:
            raise RefreshControllerError("refresh controller already started")
        if interval <= 0:
            raise RefreshControllerError(f"interval must be positive, got {interval}")

        for resource in self._authorized_resources:
            if not await self._authorizer.is_authorized(resource, AUTHORIZATION_VERBS):
                logger.error("Startup authorization denied for %s", resource)
                raise AuthorizationDeniedError(resource, AUTHORIZATION_VERBS)

        self._started = True
        self._stop_event.clear()
        self._tasks = [
            asyncio.create_task(
                self._run_cycle(RefreshCycle.NODES, self._run_node_cycle, interval),
                name="kubelens-node-cycle",
            ),
            asyncio.create_task(
                self._run_cycle(RefreshCycle.SUMMARY, self._run_summary_cycle, interval),
                name="kubelens-summary-cycle",
            ),
        ]
        logger.info("Refresh cycles started (interval=%ss)", interval)

    async def stop(self, timeout: float = CYCLE_SHUTDOWN_TIMEOUT) -> None:
        """Signal both cycles to stop and wait for in-flight work to drain."""
        self._stop_event.set()
        tasks, self._tasks = self._tasks, []
        if not tasks:
            return
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning("Cancelled %d refresh task(s) after shutdown timeout", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("Refresh cycles stopped")

    async def _run_cycle(
        self,
        cycle: RefreshCycle,
        run_once: Callable[[], Any],
        interval: float,
    ) -> None:
        while not self._stop_event.is_set():
            await run_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        logger.debug("%s cycle exited", cycle.value)

    async def _deliver(self, func: RefreshCallback | None, value: Any) -> None:
        if func is None or self._stop_event.is_set():
            return
        try:
            result = func(value)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Refresh callback %r raised", func)

    async def _run_node_cycle(self) -> None:
        try:
            nodes, pods = await self.refresh_nodes_once()
        except KubeLensError as exc:
            logger.warning("Skipping node cycle: %s", exc)
            self.update_fetch_state(self.SOURCE_NODES, FetchState.ERROR, str(exc))
            return
        except Exception as exc:
            logger.exception("Node cycle failed")
            self.update_fetch_state(self.SOURCE_NODES, FetchState.ERROR, str(exc))
            return
        await self._deliver(self._node_refresh_func, nodes)
        await self._deliver(self._pod_refresh_func, pods)

    async def _run_summary_cycle(self) -> None:
        try:
            summary = await self.refresh_summary_once()
        except KubeLensError as exc:
            logger.warning("Skipping summary cycle: %s", exc)
            self.update_fetch_state(self.SOURCE_SUMMARY, FetchState.ERROR, str(exc))
            return
        except Exception as exc:
            logger.exception("Summary cycle failed")
            self.update_fetch_state(self.SOURCE_SUMMARY, FetchState.ERROR, str(exc))
            return
        await self._deliver(self._summary_refresh_func, summary)

    # ------------------------------------------------------------------
    # Cycle bodies
    # ------------------------------------------------------------------

    async def _probe_nodes(self, addresses: dict[str, str]) -> dict[str, ProbeState]:
        """Probe every node concurrently, keyed by node name."""

        async def _probe(name: str) -> ProbeState:
            return await self._prober.probe(addresses[name], self._probe_service)

        return await concurrent_map(
            addresses,
            _probe,
            default=ProbeState.UNKNOWN,
            limit=self._probe_limit,
        )

    async def _node_usages(self, names: Iterable[str]) -> dict[str, ResourceUsage | None]:
        async def _usage(name: str) -> ResourceUsage | None:
            try:
                return await self._metrics.node_metrics(name)
            except MetricsUnavailableError as exc:
                logger.debug("No metrics for node %s: %s", name, exc)
                return None

        return await concurrent_map(names, _usage, default=None)

    async def _pod_usages(
        self, pods: list[RawObject]
    ) -> dict[tuple[str, str], ResourceUsage | None]:
        by_key = {_pod_key(pod): pod for pod in pods}

        async def _usage(key: tuple[str, str]) -> ResourceUsage | None:
            try:
                return await self._metrics.pod_metrics(by_key[key])
            except MetricsUnavailableError:
                return None

        return await concurrent_map(by_key, _usage, default=None)

    async def refresh_nodes_once(self) -> tuple[list[NodeModel], list[PodModel]]:
        """Run one node cycle and return the sorted node and pod snapshots.

        Raises:
            AuthorizationDeniedError: Node read access was revoked.
            AuthorizationCheckError: The authorization check failed.
            SourceUnavailableError: Nodes or pods could not be listed.
        """
        self.update_fetch_state(self.SOURCE_NODES, FetchState.LOADING)
        if not await self._authorizer.is_authorized(self._NODE_RESOURCE, AUTHORIZATION_VERBS):
            raise AuthorizationDeniedError(self._NODE_RESOURCE, AUTHORIZATION_VERBS)

        raw_nodes, raw_pods = await asyncio.gather(
            self._objects.list_nodes(),
            self._objects.list_pods(),
        )
        pods_by_node = partition_pods_by_node(raw_pods)
        names = [str(node.get("metadata", {}).get("name", "")) for node in raw_nodes]

        probe_states = await self._probe_nodes(
            {name: node_address(node, "InternalIP") for name, node in zip(names, raw_nodes)}
        )
        usages = await self._node_usages(names)
        metrics_available = self._metrics.is_available()

        nodes = [
            self._node_parser.parse_node_model(
                node,
                pods_by_node.get(name, []),
                usages.get(name),
                metrics_available=metrics_available,
                probe_active=probe_states.get(name) == ProbeState.ACTIVE,
            )
            for name, node in zip(names, raw_nodes)
        ]
        sort_nodes(nodes, self._node_sort_field, descending=self._node_sort_descending)

        nodes_by_name = {node.name: node for node in nodes}
        pod_usages = await self._pod_usages(raw_pods) if metrics_available else {}
        pods: list[PodModel] = []
        for pod in raw_pods:
            pods.append(
                self._pod_parser.parse_pod_model(
                    pod,
                    pod_usages.get(_pod_key(pod)),
                    nodes_by_name.get(str(pod.get("spec", {}).get("nodeName") or "")),
                )
            )
        sort_pods(pods, self._pod_sort_field, descending=self._pod_sort_descending)

        self._snapshot_store.update_live(pods)
        self._nodes = nodes
        self._pods = pods
        self._metrics_basis = metrics_available
        self._last_node_update = datetime.now(timezone.utc)
        self.update_fetch_state(self.SOURCE_NODES, FetchState.SUCCESS)
        logger.debug("Node cycle: %d nodes, %d pods", len(nodes), len(pods))
        return [node.clone() for node in nodes], copy_pods(pods)

    async def refresh_summary_once(self) -> ClusterSummary:
        """Run one summary cycle and return the new cluster summary.

        Raises:
            SourceUnavailableError: Any of the listed kinds could not be read.
        """
        self.update_fetch_state(self.SOURCE_SUMMARY, FetchState.LOADING)
        listed = await asyncio.gather(
            self._objects.list_namespaces(),
            self._objects.list_nodes(),
            self._objects.list_pods(),
            self._objects.list_deployments(),
            self._objects.list_daemonsets(),
            self._objects.list_replicasets(),
            self._objects.list_statefulsets(),
            self._objects.list_jobs(),
            self._objects.list_cronjobs(),
            self._objects.list_persistent_volumes(),
            self._objects.list_persistent_volume_claims(),
        )
        inputs = SummaryInputs(*listed)
        names = [str(node.get("metadata", {}).get("name", "")) for node in inputs.nodes]

        # The summary probes by first listed address, independent of the node cycle.
        probe_states = await self._probe_nodes(
            {name: node_address(node) for name, node in zip(names, inputs.nodes)}
        )
        usages = await self._node_usages(names)

        summary = self._summary_parser.parse_summary(
            inputs,
            {name: usage for name, usage in usages.items() if usage is not None},
            probe_states,
            now=datetime.now(timezone.utc),
        )
        self._summary = summary
        self._last_summary_update = datetime.now(timezone.utc)
        self.update_fetch_state(self.SOURCE_SUMMARY, FetchState.SUCCESS)
        return summary.model_copy(deep=True)

    # ------------------------------------------------------------------
    # User-triggered operations
    # ------------------------------------------------------------------

    def pin(self) -> RetainedSnapshot:
        """Pin the latest live pod slice."""
        return self._snapshot_store.pin()

    def diff(self) -> SnapshotDiff:
        """Pods added and removed since the pinned snapshot."""
        return self._snapshot_store.diff()

    def sort_nodes_by(
        self, field: NodeSortField | str, *, descending: bool = False
    ) -> list[NodeModel]:
        """Change the node ordering and return the re-sorted latest snapshot."""
        self._node_sort_field = field
        self._node_sort_descending = descending
        sort_nodes(self._nodes, field, descending=descending)
        return [node.clone() for node in self._nodes]

    def sort_pods_by(
        self, field: PodSortField | str, *, descending: bool = False
    ) -> list[PodModel]:
        """Change the pod ordering and return the re-sorted latest snapshot."""
        self._pod_sort_field = field
        self._pod_sort_descending = descending
        sort_pods(self._pods, field, descending=descending)
        return copy_pods(self._pods)

    def metrics_available(self) -> bool:
        """Whether the latest node snapshot carries measured usage.

        Reports the basis captured by the last node cycle so the label always
        matches the figures on screen; before the first cycle it asks the
        metrics backend directly.
        """
        if self._metrics_basis is None:
            return self._metrics.is_available()
        return self._metrics_basis

    @property
    def snapshot_store(self) -> SnapshotStore:
        return self._snapshot_store

    @property
    def node_sort_field(self) -> NodeSortField | str:
        return self._node_sort_field

    @property
    def pod_sort_field(self) -> PodSortField | str:
        return self._pod_sort_field

    @property
    def summary(self) -> ClusterSummary | None:
        return self._summary.model_copy(deep=True) if self._summary else None

    @property
    def last_node_update(self) -> datetime | None:
        return self._last_node_update

    @property
    def last_summary_update(self) -> datetime | None:
        return self._last_summary_update


__all__ = [
    "RefreshCallback",
    "RefreshController",
]
