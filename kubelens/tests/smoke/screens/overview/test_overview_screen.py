"""Smoke tests for OverviewScreen - composition, keybindings and controller wiring.

This module drives KubeLensApp through Textual's pilot with in-memory cluster
sources, covering:
- Tables filled from the first refresh cycle
- Visibility toggles (n / p)
- Pinning and diffing snapshots (s / d)
- Sort field cycling (o / O)
- Exit on startup authorization denial
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from textual.widgets import DataTable

from kubelens.app import KubeLensApp
from kubelens.constants.enums import NodeSortField, PodSortField, ProbeState
from kubelens.controllers.errors import MetricsUnavailableError
from kubelens.controllers.refresh import RefreshController
from kubelens.keyboard import OVERVIEW_SCREEN_BINDINGS
from kubelens.models.core.node_model import ResourceUsage
from kubelens.models.state.app_settings import AppSettings
from kubelens.screens.overview import OverviewScreen
from kubelens.screens.overview.config import (
    DIFF_TABLE_ID,
    NODES_TABLE_ID,
    PODS_TABLE_ID,
)


class StaticObjectCache:
    """ObjectCache serving fixed node and pod lists."""

    def __init__(self, nodes: list[dict[str, Any]], pods: list[dict[str, Any]]) -> None:
        self.nodes = nodes
        self.pods = pods

    async def list_nodes(self) -> list[dict[str, Any]]:
        return list(self.nodes)

    async def list_pods(self) -> list[dict[str, Any]]:
        return list(self.pods)

    async def list_namespaces(self) -> list[dict[str, Any]]:
        return [{"metadata": {"name": "default"}}, {"metadata": {"name": "shop"}}]

    async def _empty(self) -> list[dict[str, Any]]:
        return []

    list_deployments = _empty
    list_daemonsets = _empty
    list_replicasets = _empty
    list_statefulsets = _empty
    list_jobs = _empty
    list_cronjobs = _empty
    list_persistent_volumes = _empty
    list_persistent_volume_claims = _empty


class NoMetrics:
    """MetricsAccessor for a cluster without a metrics backend."""

    async def node_metrics(self, name: str) -> ResourceUsage:
        raise MetricsUnavailableError("metrics.k8s.io not installed")

    async def pod_metrics(self, pod: dict[str, Any]) -> ResourceUsage:
        raise MetricsUnavailableError("metrics.k8s.io not installed")

    def is_available(self) -> bool:
        return False


class FixedAuthorizer:
    """Authorizer with a fixed answer."""

    def __init__(self, allowed: bool) -> None:
        self.allowed = allowed

    async def is_authorized(self, resource: str, verbs: Sequence[str]) -> bool:
        return self.allowed


def _app(cluster: StaticObjectCache, *, allowed: bool = True) -> KubeLensApp:
    prober = MagicMock()
    prober.probe = AsyncMock(return_value=ProbeState.ACTIVE)
    controller = RefreshController(
        cluster,
        NoMetrics(),
        FixedAuthorizer(allowed),
        prober,
        probe_service="scini",
    )
    return KubeLensApp(AppSettings(), controller)


async def _wait_for_rows(pilot, table: DataTable, count: int = 1) -> None:
    for _ in range(200):
        if table.row_count >= count:
            return
        await pilot.pause(0.02)
    raise AssertionError(f"{table.id} never reached {count} rows")


def _table(app: KubeLensApp, table_id: str) -> DataTable:
    return app.screen.query_one(f"#{table_id}", DataTable)


@pytest.fixture
def cluster(make_node, make_pod) -> StaticObjectCache:
    return StaticObjectCache(
        nodes=[
            make_node("worker-2", internal_ip="10.0.0.2"),
            make_node("worker-1", internal_ip="10.0.0.1"),
        ],
        pods=[
            make_pod("web", namespace="shop"),
            make_pod("api", namespace="shop"),
            make_pod("zz", namespace="default"),
        ],
    )


# =============================================================================
# Composition
# =============================================================================


@pytest.mark.smoke
class TestOverviewScreenComposition:
    """Test OverviewScreen class attributes."""

    def test_screen_uses_overview_bindings(self) -> None:
        """The screen exposes the overview key map."""
        assert OverviewScreen.BINDINGS is OVERVIEW_SCREEN_BINDINGS
        keys = {b.key for b in OverviewScreen.BINDINGS}
        assert {"n", "p", "s", "d", "o", "O"} <= keys

    @pytest.mark.asyncio
    async def test_first_cycle_fills_tables(self, cluster) -> None:
        """Nodes and pods from the first cycle land in the tables."""
        app = _app(cluster)
        async with app.run_test(size=(160, 50)) as pilot:
            assert isinstance(app.screen, OverviewScreen)
            nodes = _table(app, NODES_TABLE_ID)
            pods = _table(app, PODS_TABLE_ID)
            await _wait_for_rows(pilot, nodes, 2)
            await _wait_for_rows(pilot, pods, 3)

            assert [nodes.get_row_at(i)[1] for i in range(2)] == ["worker-1", "worker-2"]
            assert [pods.get_row_at(i)[:2] for i in range(3)] == [
                ["default", "zz"],
                ["shop", "api"],
                ["shop", "web"],
            ]
            assert not _table(app, DIFF_TABLE_ID).display


# =============================================================================
# Keybindings
# =============================================================================


@pytest.mark.smoke
class TestOverviewScreenKeybindings:
    """Test the overview actions through the pilot."""

    @pytest.mark.asyncio
    async def test_toggle_nodes_and_pods(self, cluster) -> None:
        """n and p hide and show their tables."""
        app = _app(cluster)
        async with app.run_test(size=(160, 50)) as pilot:
            await pilot.press("n")
            await pilot.pause()
            assert not _table(app, NODES_TABLE_ID).display
            assert _table(app, PODS_TABLE_ID).display

            await pilot.press("p", "n")
            await pilot.pause()
            assert _table(app, NODES_TABLE_ID).display
            assert not _table(app, PODS_TABLE_ID).display

    @pytest.mark.asyncio
    async def test_pin_then_diff(self, cluster, make_pod) -> None:
        """s pins the live pods and d lists what changed since."""
        app = _app(cluster)
        async with app.run_test(size=(160, 50)) as pilot:
            await _wait_for_rows(pilot, _table(app, PODS_TABLE_ID), 3)

            await pilot.press("s")
            await pilot.pause()
            pinned = app.snapshot_store.pinned
            assert pinned is not None
            assert len(pinned.pods) == 3

            cluster.pods = [
                make_pod("api", namespace="shop"),
                make_pod("zz", namespace="default"),
                make_pod("cart", namespace="shop"),
            ]
            await app.controller.refresh_nodes_once()

            await pilot.press("d")
            await pilot.pause()
            diff = _table(app, DIFF_TABLE_ID)
            assert diff.display
            rows = [diff.get_row_at(i) for i in range(diff.row_count)]
            assert [(str(r[0]), r[2]) for r in rows] == [("+", "cart"), ("-", "web")]

            await pilot.press("d")
            await pilot.pause()
            assert not diff.display

    @pytest.mark.asyncio
    async def test_sort_cycling(self, cluster) -> None:
        """o and O advance the node and pod sort fields."""
        app = _app(cluster)
        async with app.run_test(size=(160, 50)) as pilot:
            pods = _table(app, PODS_TABLE_ID)
            await _wait_for_rows(pilot, pods, 3)

            await pilot.press("o")
            await pilot.pause()
            assert app.presenter.node_sort_field == NodeSortField.STATUS
            assert app.controller.node_sort_field == NodeSortField.STATUS

            await pilot.press("O")
            await pilot.pause()
            assert app.controller.pod_sort_field == PodSortField.NAME
            assert [pods.get_row_at(i)[1] for i in range(3)] == ["api", "web", "zz"]


# =============================================================================
# Startup
# =============================================================================


@pytest.mark.smoke
class TestOverviewScreenStartup:
    """Test startup failure handling."""

    @pytest.mark.asyncio
    async def test_denied_startup_exits_with_error(self, cluster) -> None:
        """A denied startup check exits the app with a non-zero code."""
        app = _app(cluster, allowed=False)
        async with app.run_test(size=(160, 50)):
            for _ in range(200):
                if app.return_code is not None:
                    break
                await asyncio.sleep(0.02)

        assert app.return_code == 1
        assert not app.controller.is_running
