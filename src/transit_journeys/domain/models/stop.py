"""Stop domain model."""

from dataclasses import dataclass
from datetime import datetime

from transit_journeys.domain.models.location import Location


@dataclass(frozen=True)
class Stop:
    """A call of a public leg at a location."""

    location: Location
    planned_arrival_time: datetime | None = None
    predicted_arrival_time: datetime | None = None
    planned_departure_time: datetime | None = None
    predicted_departure_time: datetime | None = None
    position: str | None = None  # Platform label, e.g. "3a"

    @property
    def arrival_time(self) -> datetime | None:
        return self.predicted_arrival_time or self.planned_arrival_time

    @property
    def departure_time(self) -> datetime | None:
        return self.predicted_departure_time or self.planned_departure_time
