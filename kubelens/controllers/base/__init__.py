"""Base controller classes."""

from kubelens.controllers.base.base_controller import BaseController, FetchStatus
from kubelens.controllers.base.kubectl_controller import (
    KubectlCommandError,
    KubectlController,
    KubectlRunner,
)

__all__ = [
    "BaseController",
    "FetchStatus",
    "KubectlCommandError",
    "KubectlController",
    "KubectlRunner",
]
