"""Main application class for KubeLens."""

from __future__ import annotations

import logging

from textual.app import App
from textual.binding import Binding

from kubelens.constants import APP_TITLE
from kubelens.controllers.refresh import RefreshController
from kubelens.keyboard.app import APP_BINDINGS
from kubelens.models.cache.snapshot_store import SnapshotStore
from kubelens.models.state.app_settings import AppSettings
from kubelens.screens.overview import OverviewPresenter, OverviewScreen

logger = logging.getLogger(__name__)


class KubeLensApp(App[None]):
    """Main TUI application for KubeLens."""

    TITLE = APP_TITLE
    BINDINGS: list[Binding] = APP_BINDINGS

    settings: AppSettings

    def __init__(
        self,
        settings: AppSettings | None = None,
        controller: RefreshController | None = None,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.settings = settings or AppSettings()
        self.controller = controller or RefreshController.from_settings(
            self.settings, snapshot_store=SnapshotStore()
        )
        self.snapshot_store = self.controller.snapshot_store
        self.presenter = OverviewPresenter(
            probe_service=self.settings.probe_service,
            node_sort_field=self.settings.node_sort_field,
            pod_sort_field=self.settings.pod_sort_field,
            show_nodes=self.settings.show_nodes,
            show_pods=self.settings.show_pods,
        )
        if self.settings.context:
            self.sub_title = self.settings.context

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(
            OverviewScreen(
                self.controller,
                self.presenter,
                interval=self.settings.refresh_interval,
            )
        )

    async def on_unmount(self) -> None:
        await self.controller.stop()
