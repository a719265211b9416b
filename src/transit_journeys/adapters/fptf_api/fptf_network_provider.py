"""transport.rest network provider."""

import json
import logging
from datetime import datetime
from typing import Any

from transit_journeys.adapters.fptf_api.constants import DEFAULT_BASE_URL, FPTF_MODE_TABLE
from transit_journeys.adapters.fptf_api.departure_parser import FptfDepartureParser
from transit_journeys.adapters.fptf_api.journey_parser import FptfJourneyParser
from transit_journeys.adapters.fptf_api.location_parser import FptfLocationParser
from transit_journeys.adapters.fptf_api.request_builder import FptfRequestBuilder
from transit_journeys.adapters.http_transport import HttpRequest
from transit_journeys.adapters.modes.mode_taxonomy import ModeTable, ModeTaxonomyMapper
from transit_journeys.adapters.time_parsing import get_timezone
from transit_journeys.domain.errors import (
    BackendUnavailableError,
    HttpStatusError,
    ParserError,
    PolicyViolationError,
    UnresolvedLocationError,
)
from transit_journeys.domain.models.error_details import ErrorDetails
from transit_journeys.domain.models.location import Location, LocationType
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
from transit_journeys.domain.models.trip_query import PaginationContext, TripQuery
from transit_journeys.domain.ports.text_transport import TextTransport
from transit_journeys.domain.services.location_policy import require_identified
from transit_journeys.domain.services.trip_pagination import TripPaginationEngine

logger = logging.getLogger(__name__)

# How far ahead departures are fetched
DEPARTURES_DURATION_MINUTES = 60


def _error_details(e: Exception) -> ErrorDetails:
    status_code = e.status if isinstance(e, HttpStatusError) else None
    return ErrorDetails(status_code=status_code, reason=str(e))


class FptfNetworkProvider:
    """Network provider backed by a transport.rest API.

    Trips are paged with the server's earlierRef/laterRef cursors.
    """

    def __init__(
        self,
        transport: TextTransport,
        base_url: str = DEFAULT_BASE_URL,
        tables: NetworkTables | None = None,
        language: str = "de",
        results: int = 6,
        timezone: str = "Europe/Berlin",
        mode_table: ModeTable = FPTF_MODE_TABLE,
    ) -> None:
        self._transport = transport
        self._tables = tables or NetworkTables()
        self.network = self._tables.network or "fptf"
        self._mapper = ModeTaxonomyMapper(mode_table)
        self._requests = FptfRequestBuilder(
            base_url, self._mapper, get_timezone(timezone), language=language, results=results
        )
        self._pagination: TripPaginationEngine[HttpRequest] = TripPaginationEngine(
            self._requests.journeys, uses_server_cursor=True
        )
        self._locations = FptfLocationParser(self._tables)
        self._journeys = FptfJourneyParser(self._mapper, self._tables, self._locations)
        self._departures = FptfDepartureParser(self._journeys, self._locations)

    @property
    def default_products(self) -> frozenset[Product]:
        return self._tables.default_products or Product.all()

    async def _fetch_json(self, request: HttpRequest) -> Any:
        body = await self._transport.get_text(request.url, request.params)
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON from {request.url}: {e}")
            raise ParserError(f"Invalid JSON from {request.url}") from e

    async def query_trips(self, query: TripQuery) -> QueryTripsResult:
        require_identified(query.from_location, query.via, query.to_location)
        request, seed = self._pagination.initial_query(query)
        return await self._query_journeys(request, seed, None, later=True)

    async def query_more_trips(self, context: PaginationContext, later: bool) -> QueryTripsResult:
        request, seed = self._pagination.continue_query(context, later)
        return await self._query_journeys(request, seed, context, later)

    async def _query_journeys(
        self,
        request: HttpRequest,
        seed: TripQuery,
        previous: PaginationContext | None,
        later: bool,
    ) -> QueryTripsResult:
        try:
            document = await self._fetch_json(request)
        except BackendUnavailableError as e:
            return QueryTripsResult(QueryTripsStatus.SERVICE_DOWN, error=_error_details(e))
        except HttpStatusError as e:
            if e.status >= 500:
                return QueryTripsResult(QueryTripsStatus.SERVICE_DOWN, error=_error_details(e))
            if e.status in (400, 404):
                return QueryTripsResult(QueryTripsStatus.NO_TRIPS, error=_error_details(e))
            raise

        if not isinstance(document, dict):
            raise ParserError("Journeys response is not an object")
        try:
            trips = self._journeys.parse_trips(document, seed.from_location, seed.to_location)
        except ParserError as e:
            logger.warning(f"Could not parse journeys from {request.url}: {e}")
            raise

        if not trips and previous is None:
            return QueryTripsResult(QueryTripsStatus.NO_TRIPS)

        context = self._pagination.build_context(
            seed,
            trips,
            previous,
            earlier_cursor=document.get("earlierRef"),
            later_cursor=document.get("laterRef"),
            later=later,
        )
        return QueryTripsResult.ok(trips, context)

    async def query_departures(
        self,
        station_id: str,
        time: datetime | None = None,
        max_departures: int = 10,
        include_equivalent_stations: bool = False,
    ) -> QueryDeparturesResult:
        if not station_id:
            raise PolicyViolationError("station_id must not be empty")
        request = self._requests.departures(
            station_id, time, max_departures, DEPARTURES_DURATION_MINUTES
        )
        try:
            data = await self._fetch_json(request)
        except BackendUnavailableError as e:
            return QueryDeparturesResult(
                QueryDeparturesStatus.SERVICE_DOWN, error=_error_details(e)
            )
        except HttpStatusError as e:
            if e.status in (400, 404):
                return QueryDeparturesResult(QueryDeparturesStatus.INVALID_STATION)
            if e.status >= 500:
                return QueryDeparturesResult(
                    QueryDeparturesStatus.SERVICE_DOWN, error=_error_details(e)
                )
            raise
        return self._departures.parse_departures(
            data, station_id, max_departures, include_equivalent_stations
        )

    async def query_nearby_locations(
        self,
        types: set[LocationType],
        location: Location,
        max_distance_meters: int = 0,
        max_results: int = 0,
    ) -> NearbyLocationsResult:
        try:
            point = location.coord
            if point is None:
                if not location.id:
                    raise UnresolvedLocationError("Nearby search needs a coordinate or station id")
                point = self._locations.parse(
                    await self._fetch_json(self._requests.stop(location.id))
                ).coord
                if point is None:
                    return NearbyLocationsResult(NearbyLocationsStatus.INVALID_ID)

            wanted = types or {LocationType.STATION}
            stops = bool(wanted & {LocationType.STATION, LocationType.ANY})
            poi = bool(wanted & {LocationType.POI, LocationType.ANY})
            data = await self._fetch_json(
                self._requests.nearby(point, max_distance_meters, max_results, stops, poi)
            )
        except BackendUnavailableError:
            return NearbyLocationsResult(NearbyLocationsStatus.SERVICE_DOWN)
        except HttpStatusError as e:
            if e.status in (400, 404):
                return NearbyLocationsResult(NearbyLocationsStatus.INVALID_ID)
            if e.status >= 500:
                return NearbyLocationsResult(NearbyLocationsStatus.SERVICE_DOWN)
            raise

        if not isinstance(data, list):
            raise ParserError("Nearby response is not a list")
        locations = [self._locations.parse(entry) for entry in data]
        if max_results:
            locations = locations[:max_results]
        return NearbyLocationsResult(NearbyLocationsStatus.OK, tuple(locations))

    async def suggest_locations(self, text: str) -> SuggestLocationsResult:
        data = await self._fetch_json(self._requests.locations(text))
        if not isinstance(data, list):
            raise ParserError("Locations response is not a list")
        count = len(data)
        return SuggestLocationsResult(
            tuple(
                SuggestedLocation(self._locations.parse(entry), count - index)
                for index, entry in enumerate(data)
            )
        )
