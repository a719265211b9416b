"""Result envelopes returned by network providers."""

from dataclasses import dataclass
from enum import Enum

from transit_journeys.domain.models.departure import StationDepartures
from transit_journeys.domain.models.error_details import ErrorDetails
from transit_journeys.domain.models.location import Location
from transit_journeys.domain.models.trip import Trip
from transit_journeys.domain.models.trip_query import PaginationContext


class QueryTripsStatus(Enum):
    OK = "ok"
    AMBIGUOUS = "ambiguous"
    TOO_CLOSE = "too_close"
    UNKNOWN_FROM = "unknown_from"
    UNKNOWN_VIA = "unknown_via"
    UNKNOWN_TO = "unknown_to"
    NO_TRIPS = "no_trips"
    INVALID_DATE = "invalid_date"
    SERVICE_DOWN = "service_down"


@dataclass(frozen=True)
class QueryTripsResult:
    """Outcome of a trip query or of a request for earlier/later trips."""

    status: QueryTripsStatus
    trips: tuple[Trip, ...] = ()
    context: PaginationContext | None = None
    ambiguous_from: tuple[Location, ...] | None = None
    ambiguous_via: tuple[Location, ...] | None = None
    ambiguous_to: tuple[Location, ...] | None = None
    error: ErrorDetails | None = None

    @classmethod
    def ok(cls, trips: list[Trip], context: PaginationContext) -> "QueryTripsResult":
        return cls(status=QueryTripsStatus.OK, trips=tuple(trips), context=context)

    @classmethod
    def ambiguous(
        cls,
        ambiguous_from: list[Location] | None,
        ambiguous_via: list[Location] | None,
        ambiguous_to: list[Location] | None,
    ) -> "QueryTripsResult":
        return cls(
            status=QueryTripsStatus.AMBIGUOUS,
            ambiguous_from=tuple(ambiguous_from) if ambiguous_from is not None else None,
            ambiguous_via=tuple(ambiguous_via) if ambiguous_via is not None else None,
            ambiguous_to=tuple(ambiguous_to) if ambiguous_to is not None else None,
        )


class QueryDeparturesStatus(Enum):
    OK = "ok"
    INVALID_STATION = "invalid_station"
    SERVICE_DOWN = "service_down"


@dataclass(frozen=True)
class QueryDeparturesResult:
    status: QueryDeparturesStatus
    station_departures: tuple[StationDepartures, ...] = ()
    error: ErrorDetails | None = None

    def find_station_departures(self, station_id: str) -> StationDepartures | None:
        return next(
            (sd for sd in self.station_departures if sd.location.id == station_id),
            None,
        )


class NearbyLocationsStatus(Enum):
    OK = "ok"
    INVALID_ID = "invalid_id"
    SERVICE_DOWN = "service_down"


@dataclass(frozen=True)
class NearbyLocationsResult:
    status: NearbyLocationsStatus
    locations: tuple[Location, ...] = ()


@dataclass(frozen=True)
class SuggestedLocation:
    location: Location
    priority: int


@dataclass(frozen=True)
class SuggestLocationsResult:
    suggested_locations: tuple[SuggestedLocation, ...] = ()

    @property
    def locations(self) -> list[Location]:
        """Suggested locations, most relevant first."""
        ranked = sorted(self.suggested_locations, key=lambda s: -s.priority)
        return [s.location for s in ranked]
