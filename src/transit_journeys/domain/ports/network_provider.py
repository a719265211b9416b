"""Network provider port."""

from datetime import datetime
from typing import Protocol

from transit_journeys.domain.models.location import Location, LocationType
from transit_journeys.domain.models.product import Product
from transit_journeys.domain.models.results import (
    NearbyLocationsResult,
    QueryDeparturesResult,
    QueryTripsResult,
    SuggestLocationsResult,
)
from transit_journeys.domain.models.trip_query import PaginationContext, TripQuery


class NetworkProvider(Protocol):
    """Port for querying one journey-planning backend."""

    network: str

    @property
    def default_products(self) -> frozenset[Product]:
        """Products queried when the caller does not restrict them."""
        ...

    async def query_trips(self, query: TripQuery) -> QueryTripsResult:
        """Query trips for identified from/via/to locations."""
        ...

    async def query_more_trips(
        self, context: PaginationContext, later: bool
    ) -> QueryTripsResult:
        """Query trips earlier or later than a previous result."""
        ...

    async def query_departures(
        self,
        station_id: str,
        time: datetime | None = None,
        max_departures: int = 10,
        include_equivalent_stations: bool = False,
    ) -> QueryDeparturesResult:
        """Get departures for a station."""
        ...

    async def query_nearby_locations(
        self,
        types: set[LocationType],
        location: Location,
        max_distance_meters: int = 0,
        max_results: int = 0,
    ) -> NearbyLocationsResult:
        """Find locations near a coordinate or station."""
        ...

    async def suggest_locations(self, text: str) -> SuggestLocationsResult:
        """Autocomplete a free-text location fragment."""
        ...
