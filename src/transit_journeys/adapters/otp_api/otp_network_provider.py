"""OpenTripPlanner network provider."""

import json
import logging
from datetime import datetime, timedelta
from typing import Any

from transit_journeys.adapters.http_transport import HttpRequest
from transit_journeys.adapters.modes.mode_taxonomy import ModeTable, ModeTaxonomyMapper
from transit_journeys.adapters.otp_api.constants import OTP_MODE_TABLE, PLAN_ERROR_STATUS
from transit_journeys.adapters.otp_api.departure_parser import OtpDepartureParser
from transit_journeys.adapters.otp_api.location_parser import OtpLocationParser
from transit_journeys.adapters.otp_api.request_builder import OtpRequestBuilder
from transit_journeys.adapters.otp_api.trip_parser import OtpTripParser
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
    SuggestLocationsResult,
)
from transit_journeys.domain.models.trip_query import PaginationContext, TripQuery
from transit_journeys.domain.ports.text_transport import TextTransport
from transit_journeys.domain.services.location_policy import require_identified
from transit_journeys.domain.services.trip_pagination import TripPaginationEngine

logger = logging.getLogger(__name__)


def _service_down(e: Exception) -> ErrorDetails:
    status_code = e.status if isinstance(e, HttpStatusError) else None
    return ErrorDetails(status_code=status_code, reason=str(e))


class OtpNetworkProvider:
    """Network provider backed by an OpenTripPlanner 1.x REST API.

    Trips are paged by widening the time window around the previous result,
    at OTP's one second resolution.
    """

    def __init__(
        self,
        transport: TextTransport,
        base_url: str,
        tables: NetworkTables | None = None,
        router: str = "default",
        locale: str = "de",
        num_itineraries: int = 6,
        timezone: str = "Europe/Berlin",
        mode_table: ModeTable = OTP_MODE_TABLE,
    ) -> None:
        self._transport = transport
        self._tables = tables or NetworkTables()
        self.network = self._tables.network or "otp"
        self._mapper = ModeTaxonomyMapper(mode_table)
        self._requests = OtpRequestBuilder(
            base_url,
            self._mapper,
            get_timezone(timezone),
            router=router,
            locale=locale,
            num_itineraries=num_itineraries,
        )
        self._pagination: TripPaginationEngine[HttpRequest] = TripPaginationEngine(
            self._requests.plan, time_unit=timedelta(seconds=1)
        )
        self._locations = OtpLocationParser(self._tables)
        self._trips = OtpTripParser(self._mapper, self._tables, self._locations)
        self._departures = OtpDepartureParser(self._mapper, self._tables)

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
        return await self._query_plan(request, seed, None)

    async def query_more_trips(self, context: PaginationContext, later: bool) -> QueryTripsResult:
        request, seed = self._pagination.continue_query(context, later)
        return await self._query_plan(request, seed, context)

    async def _query_plan(
        self, request: HttpRequest, seed: TripQuery, previous: PaginationContext | None
    ) -> QueryTripsResult:
        try:
            document = await self._fetch_json(request)
        except BackendUnavailableError as e:
            return QueryTripsResult(QueryTripsStatus.SERVICE_DOWN, error=_service_down(e))
        except HttpStatusError as e:
            if e.status >= 500:
                return QueryTripsResult(QueryTripsStatus.SERVICE_DOWN, error=_service_down(e))
            raise

        if not isinstance(document, dict):
            raise ParserError("Plan response is not an object")

        error = document.get("error")
        if error:
            return self._plan_error(error)

        try:
            trips = self._trips.parse_trips(document, seed.from_location, seed.to_location)
        except ParserError as e:
            logger.warning(f"Could not parse plan from {request.url}: {e}")
            raise

        if not trips and previous is None:
            return QueryTripsResult(QueryTripsStatus.NO_TRIPS)

        context = self._pagination.build_context(seed, trips, previous)
        logger.debug(f"Parsed {len(trips)} trip(s) from {request.url}")
        return QueryTripsResult.ok(trips, context)

    @staticmethod
    def _plan_error(error: Any) -> QueryTripsResult:
        if not isinstance(error, dict):
            raise ParserError("Plan error is not an object")
        # OTP sends the symbolic id as "message" and a numeric code as "id"
        error_id = str(error.get("message") or error.get("id") or "")
        message = error.get("msg") or error_id
        status = PLAN_ERROR_STATUS.get(error_id)
        if status is None:
            logger.info(f"Unmapped OTP plan error {error_id}: {message}")
            status = QueryTripsStatus.NO_TRIPS
        details = ErrorDetails(status_code=None, reason=message)
        return QueryTripsResult(status, error=details)

    async def query_departures(
        self,
        station_id: str,
        time: datetime | None = None,
        max_departures: int = 10,
        include_equivalent_stations: bool = False,  # noqa: ARG002  # OTP has no equivalence data
    ) -> QueryDeparturesResult:
        if not station_id:
            raise PolicyViolationError("station_id must not be empty")
        start = int(time.timestamp()) if time else None
        try:
            lines = self._departures.parse_lines(
                await self._fetch_json(self._requests.stop_routes(station_id))
            )
            patterns = await self._fetch_json(
                self._requests.stop_times(station_id, max_departures, start)
            )
        except BackendUnavailableError as e:
            return QueryDeparturesResult(QueryDeparturesStatus.SERVICE_DOWN, error=_service_down(e))
        except HttpStatusError as e:
            if e.status == 404:
                return QueryDeparturesResult(QueryDeparturesStatus.INVALID_STATION)
            if e.status >= 500:
                return QueryDeparturesResult(
                    QueryDeparturesStatus.SERVICE_DOWN, error=_service_down(e)
                )
            raise
        return self._departures.parse_departures(patterns, lines, max_departures)

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
                stop = await self._fetch_json(self._requests.stop(location.id))
                if not isinstance(stop, dict):
                    raise ParserError("Stop response is not an object")
                point = self._locations.parse_stop(stop).coord
                if point is None:
                    return NearbyLocationsResult(NearbyLocationsStatus.INVALID_ID)

            stops = await self._fetch_json(self._requests.nearby_stops(point, max_distance_meters))
        except BackendUnavailableError:
            return NearbyLocationsResult(NearbyLocationsStatus.SERVICE_DOWN)
        except HttpStatusError as e:
            if e.status == 404:
                return NearbyLocationsResult(NearbyLocationsStatus.INVALID_ID)
            if e.status >= 500:
                return NearbyLocationsResult(NearbyLocationsStatus.SERVICE_DOWN)
            raise

        if not isinstance(stops, list):
            raise ParserError("Nearby stops response is not a list")
        if not stops:
            return NearbyLocationsResult(NearbyLocationsStatus.INVALID_ID)

        locations = [self._locations.parse_stop(stop) for stop in stops]
        # OTP only knows stops
        if types and not types & {LocationType.STATION, LocationType.ANY}:
            locations = []
        if max_results:
            locations = locations[:max_results]
        return NearbyLocationsResult(NearbyLocationsStatus.OK, tuple(locations))

    async def suggest_locations(self, text: str) -> SuggestLocationsResult:
        results = await self._fetch_json(self._requests.geocode(text))
        if not isinstance(results, list):
            raise ParserError("Geocoder response is not a list")
        return SuggestLocationsResult(tuple(self._locations.parse_suggestions(results)))
