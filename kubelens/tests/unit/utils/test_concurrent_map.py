"""Tests for the concurrent_map fan-out primitive."""

from __future__ import annotations

import asyncio

import pytest

from kubelens.utils.concurrent_map import concurrent_map


@pytest.mark.unit
@pytest.mark.fast
class TestConcurrentMap:
    """Tests for concurrent_map."""

    @pytest.mark.asyncio
    async def test_collects_every_key(self) -> None:
        """Every key maps to its call's result."""

        async def _double(key: int) -> int:
            return key * 2

        result = await concurrent_map([1, 2, 3], _double, default=0)
        assert result == {1: 2, 2: 4, 3: 6}

    @pytest.mark.asyncio
    async def test_empty_keys(self) -> None:
        """No keys, no calls."""

        async def _never(key: str) -> str:
            raise AssertionError("should not be called")

        assert await concurrent_map([], _never, default="") == {}

    @pytest.mark.asyncio
    async def test_failure_maps_to_default_without_aborting_siblings(self) -> None:
        """A raising call is recorded as the default value."""

        async def _maybe_fail(key: str) -> str:
            if key == "bad":
                raise RuntimeError("boom")
            await asyncio.sleep(0)
            return key.upper()

        result = await concurrent_map(["a", "bad", "c"], _maybe_fail, default="?")
        assert result == {"a": "A", "bad": "?", "c": "C"}

    @pytest.mark.asyncio
    async def test_preserves_first_seen_order_and_dedupes(self) -> None:
        """Duplicate keys are called once and order follows first sighting."""
        calls: list[str] = []

        async def _record(key: str) -> str:
            calls.append(key)
            return key

        result = await concurrent_map(["b", "a", "b"], _record, default="")
        assert list(result) == ["b", "a"]
        assert sorted(calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_limit_bounds_in_flight_calls(self) -> None:
        """No more than ``limit`` calls run at once."""
        in_flight = 0
        peak = 0

        async def _track(key: int) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return key

        result = await concurrent_map(range(10), _track, default=-1, limit=3)
        assert len(result) == 10
        assert peak <= 3

    @pytest.mark.asyncio
    async def test_calls_run_concurrently(self) -> None:
        """Unbounded calls overlap instead of running one after another."""
        started = asyncio.Event()
        release = asyncio.Event()
        count = 0

        async def _wait(key: int) -> int:
            nonlocal count
            count += 1
            if count == 3:
                started.set()
            await release.wait()
            return key

        task = asyncio.create_task(concurrent_map([1, 2, 3], _wait, default=0))
        await asyncio.wait_for(started.wait(), timeout=1)
        release.set()
        assert await task == {1: 1, 2: 2, 3: 3}
