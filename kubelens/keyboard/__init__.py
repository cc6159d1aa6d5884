"""Keyboard bindings module.

- app: App-level bindings (APP_BINDINGS)
- navigation: Screen-specific bindings (*_SCREEN_BINDINGS)
"""

from kubelens.keyboard.app import APP_BINDINGS
from kubelens.keyboard.navigation import OVERVIEW_SCREEN_BINDINGS

__all__ = [
    "APP_BINDINGS",
    "OVERVIEW_SCREEN_BINDINGS",
]
