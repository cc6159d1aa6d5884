"""Base controller with per-source fetch state bookkeeping.

Controllers that refresh several data sources record the outcome of each
fetch here so screens can report which sources are stale or failing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from kubelens.constants.enums import FetchState

logger = logging.getLogger(__name__)


@dataclass
class FetchStatus:
    """Status tracking for a single data source fetch operation."""

    source_name: str
    state: FetchState = FetchState.SUCCESS
    error_message: str | None = None
    last_updated: datetime | None = field(default=None)

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for serialization."""
        return {
            "source_name": self.source_name,
            "state": self.state.value,
            "error_message": self.error_message,
            "last_updated": self.last_updated.isoformat()
            if self.last_updated
            else None,
        }


class BaseController:
    """Tracks the fetch state of each named data source."""

    def __init__(self) -> None:
        self._fetch_states: dict[str, FetchStatus] = {}

    def update_fetch_state(
        self,
        source: str,
        state: FetchState,
        error_message: str | None = None,
    ) -> None:
        """Update the fetch state for a data source."""
        status = self._fetch_states.setdefault(source, FetchStatus(source_name=source))
        status.state = state
        status.error_message = error_message
        if state == FetchState.SUCCESS:
            status.last_updated = datetime.now(timezone.utc)
        elif state == FetchState.ERROR:
            logger.debug("Source %s failed: %s", source, error_message)

    def get_fetch_state(self, source: str) -> FetchStatus | None:
        return self._fetch_states.get(source)

    def get_error_sources(self) -> list[str]:
        """Get list of data sources with errors."""
        return [
            source
            for source, status in self._fetch_states.items()
            if status.state == FetchState.ERROR
        ]
