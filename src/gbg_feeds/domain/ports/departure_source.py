"""Departure source port."""

from datetime import datetime
from typing import Protocol

from gbg_feeds.domain.models.departure import NormalizedStop


class DepartureSource(Protocol):
    """Port for retrieving normalized departure boards."""

    async def get_departures(
        self,
        stop_id: str,
        at_time: datetime | None = None,
        time_span_minutes: int = 60,
    ) -> NormalizedStop:
        """Get the departure board for a stop."""
        ...
