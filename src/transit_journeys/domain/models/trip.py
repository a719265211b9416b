"""Trip and leg domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import assert_never

from transit_journeys.domain.models.line import Line
from transit_journeys.domain.models.location import Location, Point
from transit_journeys.domain.models.stop import Stop


class IndividualMode(Enum):
    """Self-propelled ways of covering a leg."""

    WALK = "walk"
    BIKE = "bike"
    CAR = "car"


@dataclass(frozen=True)
class PublicLeg:
    """A leg ridden on a transit line."""

    line: Line
    destination: Location | None
    departure_stop: Stop
    arrival_stop: Stop
    intermediate_stops: tuple[Stop, ...] = ()
    path: tuple[Point, ...] = ()
    message: str | None = None

    @property
    def departure(self) -> Location:
        return self.departure_stop.location

    @property
    def arrival(self) -> Location:
        return self.arrival_stop.location

    @property
    def departure_time(self) -> datetime | None:
        return self.departure_stop.departure_time

    @property
    def arrival_time(self) -> datetime | None:
        return self.arrival_stop.arrival_time


@dataclass(frozen=True)
class IndividualLeg:
    """A walking, cycling or driving leg."""

    mode: IndividualMode
    departure: Location
    departure_time: datetime
    arrival: Location
    arrival_time: datetime
    path: tuple[Point, ...] = ()
    distance_meters: int = 0

    @property
    def minutes(self) -> int:
        return int((self.arrival_time - self.departure_time).total_seconds() // 60)


Leg = PublicLeg | IndividualLeg


@dataclass(frozen=True)
class Fare:
    """Opaque fare information passed through from the backend."""

    network: str | None
    name: str | None
    currency: str
    amount: float


@dataclass(frozen=True)
class Trip:
    """One itinerary: an ordered, non-empty sequence of legs."""

    id: str | None
    from_location: Location
    to_location: Location
    legs: tuple[Leg, ...]
    fares: tuple[Fare, ...] = field(default=(), compare=False)
    num_changes: int | None = None

    def __post_init__(self) -> None:
        if not self.legs:
            raise ValueError("A trip needs at least one leg")

    @property
    def trip_id(self) -> str:
        """Backend id, or a substitute id built from the legs."""
        return self.id or _substitute_id(self.legs)

    @property
    def first_departure_time(self) -> datetime | None:
        return self.legs[0].departure_time

    @property
    def last_arrival_time(self) -> datetime | None:
        return self.legs[-1].arrival_time

    @property
    def first_public_leg(self) -> PublicLeg | None:
        return next((leg for leg in self.legs if isinstance(leg, PublicLeg)), None)

    @property
    def last_public_leg(self) -> PublicLeg | None:
        return next((leg for leg in reversed(self.legs) if isinstance(leg, PublicLeg)), None)

    def is_contiguous(self) -> bool:
        """Check that every leg starts where the previous one ended."""
        return all(
            previous.arrival.same_place(following.departure)
            for previous, following in zip(self.legs, self.legs[1:], strict=False)
        )


def _endpoint_key(location: Location) -> str:
    if location.id:
        return location.id
    if location.coord is not None:
        return f"{location.coord.lat_e6}/{location.coord.lon_e6}"
    return location.name or ""


def _substitute_id(legs: tuple[Leg, ...]) -> str:
    parts: list[str] = []
    for leg in legs:
        parts.append(_endpoint_key(leg.departure))
        parts.append(_endpoint_key(leg.arrival))
        if isinstance(leg, IndividualLeg):
            parts.append(str(leg.minutes))
        elif isinstance(leg, PublicLeg):
            planned_departure = leg.departure_stop.planned_departure_time
            planned_arrival = leg.arrival_stop.planned_arrival_time
            parts.append(str(int(planned_departure.timestamp())) if planned_departure else "")
            parts.append(str(int(planned_arrival.timestamp())) if planned_arrival else "")
            parts.append(leg.line.label or "")
        else:
            assert_never(leg)
    return "-".join(parts)
