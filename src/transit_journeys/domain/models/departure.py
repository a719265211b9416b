"""Departure domain models."""

from dataclasses import dataclass
from datetime import datetime

from transit_journeys.domain.models.line import Line
from transit_journeys.domain.models.location import Location


@dataclass(frozen=True)
class Departure:
    """Represents a single departure from a station."""

    planned_time: datetime | None
    predicted_time: datetime | None
    line: Line
    position: str | None
    destination: Location | None
    message: str | None = None

    def __post_init__(self) -> None:
        if self.planned_time is None and self.predicted_time is None:
            raise ValueError("A departure needs a planned or a predicted time")

    @property
    def time(self) -> datetime:
        """Predicted time when known, otherwise the planned time."""
        return self.predicted_time or self.planned_time  # type: ignore[return-value]


@dataclass(frozen=True)
class LineDestination:
    """A line serving a station together with one of its destinations."""

    line: Line
    destination: Location | None


@dataclass(frozen=True)
class StationDepartures:
    """Departures and served lines of one station."""

    location: Location
    departures: tuple[Departure, ...]
    lines: tuple[LineDestination, ...] = ()
