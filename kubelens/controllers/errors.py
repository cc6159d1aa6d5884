"""Exception hierarchy for cluster data access and refresh control."""

from __future__ import annotations


class KubeLensError(Exception):
    """Base exception for KubeLens controller errors."""


class SourceUnavailableError(KubeLensError):
    """A cluster object list could not be read; the current cycle is skipped."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class MetricsUnavailableError(KubeLensError):
    """The metrics backend is missing or returned no data for an object."""


class AuthorizationCheckError(KubeLensError):
    """The authorization check itself failed (transient, retried next cycle)."""


class AuthorizationDeniedError(KubeLensError):
    """The current user may not read a required resource."""

    def __init__(self, resource: str, verbs: tuple[str, ...]) -> None:
        super().__init__(f"{', '.join(verbs)} on {resource} not authorized")
        self.resource = resource
        self.verbs = verbs


class RefreshControllerError(KubeLensError):
    """The refresh controller was used out of order."""


__all__ = [
    "AuthorizationCheckError",
    "AuthorizationDeniedError",
    "KubeLensError",
    "MetricsUnavailableError",
    "RefreshControllerError",
    "SourceUnavailableError",
]
