"""Bounded-concurrency fan-out over a set of keys."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Iterable
from typing import TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


async def concurrent_map(
    keys: Iterable[K],
    func: Callable[[K], Awaitable[V]],
    *,
    default: V,
    limit: int | None = None,
) -> dict[K, V]:
    """Run ``func`` for every key concurrently and collect the results.

    Every key is present in the returned mapping once all calls finished.
    A call that raises is logged and recorded as ``default``; it never
    aborts the siblings. Duplicate keys are called once.

    Args:
        keys: Keys to fan out over
        func: Coroutine function invoked once per key
        default: Value recorded for a key whose call raised
        limit: Maximum number of calls in flight, unbounded when None

    Returns:
        Mapping of key to result, in first-seen key order.
    """
    unique_keys = list(dict.fromkeys(keys))
    results: dict[K, V] = {}
    if not unique_keys:
        return results

    # Scoped to this invocation; concurrent callers each get their own.
    results_lock = asyncio.Lock()
    semaphore = asyncio.Semaphore(limit) if limit else None

    async def _run(key: K) -> None:
        try:
            if semaphore is None:
                value = await func(key)
            else:
                async with semaphore:
                    value = await func(key)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Concurrent call for %r failed: %s", key, exc)
            value = default
        async with results_lock:
            results[key] = value

    tasks = [asyncio.create_task(_run(key)) for key in unique_keys]
    try:
        await asyncio.gather(*tasks)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    return {key: results[key] for key in unique_keys}
