"""App-level keyboard bindings.

This module contains Textual Binding objects for app-level bindings
that work from any screen.
"""

from textual.binding import Binding

APP_BINDINGS: list[Binding] = [
    Binding("q", "app.quit", "Quit", priority=True),
]

__all__ = [
    "APP_BINDINGS",
]
