"""Overview screen - live summary, node and pod tables, and snapshot diffs."""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Static

from kubelens.controllers.errors import AuthorizationDeniedError, KubeLensError
from kubelens.keyboard import OVERVIEW_SCREEN_BINDINGS
from kubelens.models.core.cluster_summary import ClusterSummary
from kubelens.models.core.node_model import NodeModel
from kubelens.models.core.pod_model import PodModel
from kubelens.screens.overview.config import (
    DIFF_TABLE_COLUMNS,
    DIFF_TABLE_ID,
    NODE_TABLE_COLUMNS,
    NODES_TABLE_ID,
    POD_TABLE_COLUMNS,
    PODS_TABLE_ID,
    STATUS_BAR_ID,
    SUMMARY_PANEL_ID,
)
from kubelens.screens.overview.presenter import OverviewPresenter

if TYPE_CHECKING:
    from kubelens.controllers.refresh import RefreshController

logger = logging.getLogger(__name__)


class OverviewScreen(Screen[None]):
    """Single-page cluster overview fed by the refresh controller."""

    BINDINGS = OVERVIEW_SCREEN_BINDINGS

    DEFAULT_CSS = """
    OverviewScreen {
        layout: vertical;
    }

    #overview-summary {
        height: auto;
        padding: 0 1;
        border: round $primary;
    }

    #overview-nodes, #overview-pods, #overview-diff {
        height: 1fr;
    }

    #overview-status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        controller: RefreshController,
        presenter: OverviewPresenter,
        *,
        interval: float,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._presenter = presenter
        self._interval = interval
        self._showing_diff = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Waiting for cluster summary...", id=SUMMARY_PANEL_ID)
        with Vertical():
            yield DataTable(id=NODES_TABLE_ID, zebra_stripes=True)
            yield DataTable(id=PODS_TABLE_ID, zebra_stripes=True)
            yield DataTable(id=DIFF_TABLE_ID, zebra_stripes=True)
        yield Static("", id=STATUS_BAR_ID)
        yield Footer()

    def on_mount(self) -> None:
        for table_id, columns in (
            (NODES_TABLE_ID, NODE_TABLE_COLUMNS),
            (PODS_TABLE_ID, POD_TABLE_COLUMNS),
            (DIFF_TABLE_ID, DIFF_TABLE_COLUMNS),
        ):
            table = self.query_one(f"#{table_id}", DataTable)
            for label, width in columns:
                table.add_column(label, width=width)
            table.cursor_type = "row"
        self._apply_visibility()

        self._controller.set_node_refresh_func(self._on_nodes)
        self._controller.set_pod_refresh_func(self._on_pods)
        self._controller.set_summary_refresh_func(self._on_summary)
        self.run_worker(self._start_controller(), exclusive=True, group="refresh")

    async def _start_controller(self) -> None:
        try:
            await self._controller.start(self._interval)
        except AuthorizationDeniedError as exc:
            logger.error("Not authorized: %s", exc)
            self.app.exit(return_code=1, message=f"Not authorized: {exc}")
        except KubeLensError as exc:
            logger.error("Failed to start refresh cycles: %s", exc)
            self.app.exit(return_code=1, message=f"Failed to start: {exc}")

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------

    def _on_nodes(self, nodes: list[NodeModel]) -> None:
        self._presenter.metrics_available = self._controller.metrics_available()
        self._render_nodes(nodes)

    def _on_pods(self, pods: list[PodModel]) -> None:
        self._render_pods(pods)
        if self._showing_diff:
            self._render_diff()

    def _on_summary(self, summary: ClusterSummary) -> None:
        self._presenter.metrics_available = self._controller.metrics_available()
        with suppress(NoMatches):
            self.query_one(f"#{SUMMARY_PANEL_ID}", Static).update(
                Text("\n").join(self._presenter.summary_lines(summary))
            )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_nodes(self, nodes: list[NodeModel]) -> None:
        with suppress(NoMatches):
            table = self.query_one(f"#{NODES_TABLE_ID}", DataTable)
            table.clear()
            for node in nodes:
                table.add_row(*self._presenter.node_row(node), key=node.name)

    def _render_pods(self, pods: list[PodModel]) -> None:
        with suppress(NoMatches):
            table = self.query_one(f"#{PODS_TABLE_ID}", DataTable)
            table.clear()
            for pod in pods:
                table.add_row(
                    *self._presenter.pod_row(pod), key=f"{pod.namespace}/{pod.name}"
                )

    def _render_diff(self) -> None:
        diff = self._controller.diff()
        with suppress(NoMatches):
            table = self.query_one(f"#{DIFF_TABLE_ID}", DataTable)
            table.clear()
            for row in self._presenter.diff_rows(diff):
                table.add_row(*row)
        self._set_status(
            f"Diff vs pinned snapshot: +{len(diff.added)} / -{len(diff.removed)}"
        )

    def _apply_visibility(self) -> None:
        with suppress(NoMatches):
            self.query_one(f"#{NODES_TABLE_ID}", DataTable).display = self._presenter.show_nodes
            self.query_one(f"#{PODS_TABLE_ID}", DataTable).display = self._presenter.show_pods
            self.query_one(f"#{DIFF_TABLE_ID}", DataTable).display = self._showing_diff

    def _set_status(self, message: str) -> None:
        with suppress(NoMatches):
            self.query_one(f"#{STATUS_BAR_ID}", Static).update(message)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_toggle_nodes(self) -> None:
        self._presenter.toggle_nodes()
        self._apply_visibility()

    def action_toggle_pods(self) -> None:
        self._presenter.toggle_pods()
        self._apply_visibility()

    def action_pin_snapshot(self) -> None:
        snapshot = self._controller.pin()
        self._set_status(
            f"Pinned {len(snapshot.pods)} pods at {snapshot.captured_at:%H:%M:%S}"
        )
        if self._showing_diff:
            self._render_diff()

    def action_show_diff(self) -> None:
        self._showing_diff = not self._showing_diff
        self._apply_visibility()
        if not self._showing_diff:
            self._set_status("")
        elif not self._controller.snapshot_store.has_pinned:
            self._set_status("No snapshot pinned; press s to pin one")
        else:
            self._render_diff()

    def action_cycle_node_sort(self) -> None:
        field = self._presenter.next_node_sort_field()
        self._render_nodes(self._controller.sort_nodes_by(field))
        self._set_status(f"Nodes sorted by {field.value}")

    def action_cycle_pod_sort(self) -> None:
        field = self._presenter.next_pod_sort_field()
        self._render_pods(self._controller.sort_pods_by(field))
        self._set_status(f"Pods sorted by {field.value}")
