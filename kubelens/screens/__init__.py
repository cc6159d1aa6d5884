"""Screens for KubeLens."""

from kubelens.screens.overview import OverviewPresenter, OverviewScreen

__all__ = ["OverviewPresenter", "OverviewScreen"]
