"""Live departure source port."""

from datetime import datetime
from typing import Protocol

from transit_journeys.domain.models.departure import Departure


class LiveDepartureSource(Protocol):
    """Port for a real-time feed of predicted departures."""

    async def get_departures(
        self,
        station_id: str,
        limit: int = 10,
        time: datetime | None = None,
    ) -> list[Departure]:
        """Get predicted departures for a station."""
        ...
