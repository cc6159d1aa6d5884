"""Periodic refresh cycles."""

from kubelens.controllers.refresh.controller import RefreshCallback, RefreshController

__all__ = ["RefreshCallback", "RefreshController"]
