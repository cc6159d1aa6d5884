"""TTL data cache backing the local object mirror."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any


class DataCache:
    """TTL-based data cache with in-flight load deduplication.

    Performance notes:
    - Reads (get) are lock-free. asyncio is single-threaded and reads do not
      mutate the dict. Expired entries are soft-expired and replaced by the
      next load.
    - Concurrent get_or_load() calls for the same key share one loader task,
      so the node and summary cycles never issue duplicate reads.
    """

    DEFAULT_TTL_SECONDS = 2.0

    def __init__(self, ttl_seconds: float | None = None) -> None:
        self._ttl = self.DEFAULT_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._cache: dict[str, tuple[float, Any]] = {}
        self._inflight: dict[str, asyncio.Task[Any]] = {}
        self._lock = asyncio.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any:
        """Get cached data or None if missing or expired."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        stored_at, data = entry
        if time.monotonic() - stored_at > self._ttl:
            return None
        return data

    async def set(self, key: str, data: Any) -> None:
        """Cache data with current timestamp."""
        async with self._lock:
            self._cache[key] = (time.monotonic(), data)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return fresh cached data, loading it once if stale.

        Loader errors propagate to every waiter and are not cached.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        existing = self._inflight.get(key)
        if existing is not None:
            return await asyncio.shield(existing)

        task = asyncio.ensure_future(loader())
        self._inflight[key] = task
        try:
            data = await asyncio.shield(task)
            await self.set(key, data)
            return data
        finally:
            if self._inflight.get(key) is task:
                self._inflight.pop(key, None)

    async def clear(self, key: str | None = None) -> None:
        """Clear cache for specific key or all."""
        async with self._lock:
            if key:
                self._cache.pop(key, None)
            else:
                self._cache.clear()
