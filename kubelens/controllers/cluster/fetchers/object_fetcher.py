"""Object cache accessor - read-only typed lists over a local cluster mirror."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from kubelens.constants.timeouts import CLUSTER_REQUEST_TIMEOUT, OBJECT_CACHE_TTL
from kubelens.controllers.base import KubectlRunner
from kubelens.controllers.errors import SourceUnavailableError
from kubelens.models.cache.data_cache import DataCache

logger = logging.getLogger(__name__)

RawObject = dict[str, Any]


class ObjectCache(Protocol):
    """Read interface over a continuously synchronized copy of cluster objects.

    Every method may raise SourceUnavailableError.
    """

    async def list_nodes(self) -> list[RawObject]: ...

    async def list_pods(self) -> list[RawObject]: ...

    async def list_namespaces(self) -> list[RawObject]: ...

    async def list_deployments(self) -> list[RawObject]: ...

    async def list_daemonsets(self) -> list[RawObject]: ...

    async def list_replicasets(self) -> list[RawObject]: ...

    async def list_statefulsets(self) -> list[RawObject]: ...

    async def list_jobs(self) -> list[RawObject]: ...

    async def list_cronjobs(self) -> list[RawObject]: ...

    async def list_persistent_volumes(self) -> list[RawObject]: ...

    async def list_persistent_volume_claims(self) -> list[RawObject]: ...


class KubectlObjectCache:
    """ObjectCache backed by ``kubectl get -o json`` with a short TTL mirror.

    Both refresh cycles read through the same DataCache, so a kind listed by
    the node cycle is reused by the summary cycle within the TTL window and
    concurrent reads of one kind share a single kubectl call.
    """

    _CLUSTER_SCOPED = frozenset({"nodes", "namespaces", "persistentvolumes"})
    _NAMESPACED_SCOPE = frozenset({"pods"})

    def __init__(
        self,
        run_kubectl_func: KubectlRunner,
        *,
        namespace: str | None = None,
        ttl_seconds: float = OBJECT_CACHE_TTL,
        request_timeout: str = CLUSTER_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize with kubectl runner function.

        Args:
            run_kubectl_func: Async function to run kubectl commands
            namespace: Optional namespace scoping pod listings
            ttl_seconds: Freshness window of the local mirror
            request_timeout: kubectl --request-timeout value
        """
        self._run_kubectl = run_kubectl_func
        self._namespace = namespace
        self._request_timeout = request_timeout
        self._cache = DataCache(ttl_seconds)

    @property
    def namespace(self) -> str | None:
        return self._namespace

    def _build_list_args(self, kind: str) -> tuple[str, ...]:
        args: list[str] = ["get", kind]
        if kind not in self._CLUSTER_SCOPED:
            if self._namespace and kind in self._NAMESPACED_SCOPE:
                args.extend(["-n", self._namespace])
            else:
                args.append("--all-namespaces")
        args.extend(["-o", "json", f"--request-timeout={self._request_timeout}"])
        return tuple(args)

    async def _fetch_kind(self, kind: str) -> list[RawObject]:
        try:
            output = await self._run_kubectl(self._build_list_args(kind))
        except Exception as exc:
            raise SourceUnavailableError(kind, str(exc).strip() or "list failed") from exc

        if not output:
            return []
        try:
            data = json.loads(output)
        except json.JSONDecodeError as exc:
            raise SourceUnavailableError(kind, f"invalid JSON: {exc}") from exc

        items = data.get("items", []) if isinstance(data, dict) else []
        return [item for item in items if isinstance(item, dict)]

    async def _list(self, kind: str) -> list[RawObject]:
        items = await self._cache.get_or_load(kind, lambda: self._fetch_kind(kind))
        # Callers get their own list; the raw objects are treated as read-only.
        return list(items)

    async def invalidate(self) -> None:
        await self._cache.clear()

    async def list_nodes(self) -> list[RawObject]:
        return await self._list("nodes")

    async def list_pods(self) -> list[RawObject]:
        return await self._list("pods")

    async def list_namespaces(self) -> list[RawObject]:
        return await self._list("namespaces")

    async def list_deployments(self) -> list[RawObject]:
        return await self._list("deployments")

    async def list_daemonsets(self) -> list[RawObject]:
        return await self._list("daemonsets")

    async def list_replicasets(self) -> list[RawObject]:
        return await self._list("replicasets")

    async def list_statefulsets(self) -> list[RawObject]:
        return await self._list("statefulsets")

    async def list_jobs(self) -> list[RawObject]:
        return await self._list("jobs")

    async def list_cronjobs(self) -> list[RawObject]:
        return await self._list("cronjobs")

    async def list_persistent_volumes(self) -> list[RawObject]:
        return await self._list("persistentvolumes")

    async def list_persistent_volume_claims(self) -> list[RawObject]:
        return await self._list("persistentvolumeclaims")
