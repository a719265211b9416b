"""Domain models for transit journeys."""

from transit_journeys.domain.models.departure import Departure, LineDestination, StationDepartures
from transit_journeys.domain.models.error_details import ErrorDetails
from transit_journeys.domain.models.line import Line, Style
from transit_journeys.domain.models.location import Location, LocationType, Point
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.product import Product
from transit_journeys.domain.models.results import (
    NearbyLocationsResult,
    NearbyLocationsStatus,
    QueryDeparturesResult,
    QueryDeparturesStatus,
    QueryTripsResult,
    QueryTripsStatus,
    SuggestedLocation,
    SuggestLocationsResult,
)
from transit_journeys.domain.models.stop import Stop
from transit_journeys.domain.models.trip import (
    Fare,
    IndividualLeg,
    IndividualMode,
    Leg,
    PublicLeg,
    Trip,
)
from transit_journeys.domain.models.trip_query import (
    Accessibility,
    PaginationContext,
    TripOption,
    TripQuery,
    WalkSpeed,
)

__all__ = [
    "Accessibility",
    "Departure",
    "ErrorDetails",
    "Fare",
    "IndividualLeg",
    "IndividualMode",
    "Leg",
    "Line",
    "LineDestination",
    "Location",
    "LocationType",
    "NearbyLocationsResult",
    "NearbyLocationsStatus",
    "NetworkTables",
    "PaginationContext",
    "Point",
    "Product",
    "PublicLeg",
    "QueryDeparturesResult",
    "QueryDeparturesStatus",
    "QueryTripsResult",
    "QueryTripsStatus",
    "StationDepartures",
    "Stop",
    "Style",
    "SuggestLocationsResult",
    "SuggestedLocation",
    "Trip",
    "TripOption",
    "TripQuery",
    "WalkSpeed",
]
