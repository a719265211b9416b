"""Request builder for the OpenTripPlanner REST API."""

import logging
from datetime import tzinfo

from transit_journeys.adapters.http_transport import HttpRequest
from transit_journeys.adapters.modes.mode_taxonomy import ModeTaxonomyMapper
from transit_journeys.adapters.otp_api.constants import (
    DEFAULT_NEARBY_RADIUS_METERS,
    MODE_ALL_TRANSIT,
    MODE_BICYCLE,
    MODE_WALK,
    WALK_SPEED_METERS_PER_SECOND,
)
from transit_journeys.adapters.time_parsing import to_local
from transit_journeys.domain.errors import UnresolvedLocationError
from transit_journeys.domain.models.location import Location, Point
from transit_journeys.domain.models.product import Product
from transit_journeys.domain.models.trip_query import Accessibility, TripOption, TripQuery
from transit_journeys.domain.services.trip_pagination import PageCursor

logger = logging.getLogger(__name__)


class OtpRequestBuilder:
    """Builds OTP requests for one router."""

    def __init__(
        self,
        base_url: str,
        mapper: ModeTaxonomyMapper,
        timezone: tzinfo,
        router: str = "default",
        locale: str = "de",
        num_itineraries: int = 6,
    ) -> None:
        self._router_url = f"{base_url.rstrip('/')}/routers/{router}"
        self._mapper = mapper
        self._timezone = timezone
        self._locale = locale
        self._num_itineraries = num_itineraries

    def modes(self, products: frozenset[Product] | None, options: frozenset[TripOption]) -> str:
        """Mode parameter: the individual mode first, then the transit modes."""
        individual = MODE_BICYCLE if TripOption.BIKE in options else MODE_WALK
        if products is None or products == Product.all():
            return f"{individual},{MODE_ALL_TRANSIT}"
        transit = self._mapper.tokens(products)
        if not transit:
            # OTP has no token for these products; a bare individual mode would plan a walk
            logger.debug(f"No OTP mode for {sorted(p.name for p in products)}, using all transit")
            return f"{individual},{MODE_ALL_TRANSIT}"
        return ",".join([individual, *transit])

    @staticmethod
    def place(location: Location) -> str:
        """Coordinates when known, otherwise the stop id."""
        if location.coord is not None:
            return f"{location.coord.lat},{location.coord.lon}"
        if location.id:
            return location.id
        raise UnresolvedLocationError(f"Location has neither coordinate nor id: {location}")

    def plan(
        self, query: TripQuery, cursor: PageCursor | None = None  # noqa: ARG002
    ) -> HttpRequest:
        """Plan request; OTP pages by time, so a cursor is never used."""
        local_time = to_local(query.time, self._timezone)
        params = {
            "fromPlace": self.place(query.from_location),
            "toPlace": self.place(query.to_location),
            "date": local_time.strftime("%Y%m%d"),
            "time": local_time.strftime("%H:%M:%S"),
            "arriveBy": "false" if query.is_departure else "true",
            "showIntermediateStops": "true",
            "locale": self._locale,
            "numItineraries": str(self._num_itineraries),
            "walkSpeed": str(WALK_SPEED_METERS_PER_SECOND[query.walk_speed]),
            "mode": self.modes(query.products, query.options),
        }
        if query.via is not None:
            params["intermediatePlaces"] = self.place(query.via)
        if query.accessibility is Accessibility.BARRIER_FREE:
            params["wheelchair"] = "true"
        return HttpRequest(f"{self._router_url}/plan", params)

    def nearby_stops(self, point: Point, max_distance_meters: int = 0) -> HttpRequest:
        radius = max_distance_meters or DEFAULT_NEARBY_RADIUS_METERS
        return HttpRequest(
            f"{self._router_url}/index/stops",
            {"lat": str(point.lat), "lon": str(point.lon), "radius": str(radius)},
        )

    def stop(self, stop_id: str) -> HttpRequest:
        return HttpRequest(f"{self._router_url}/index/stops/{stop_id}")

    def stop_routes(self, stop_id: str) -> HttpRequest:
        return HttpRequest(f"{self._router_url}/index/stops/{stop_id}/routes")

    def stop_times(
        self, stop_id: str, max_departures: int, start_time_seconds: int | None = None
    ) -> HttpRequest:
        """Stoptimes grouped by pattern; the count applies per pattern."""
        params = {"numberOfDepartures": str(max_departures)}
        if start_time_seconds is not None:
            params["startTime"] = str(start_time_seconds)
        return HttpRequest(f"{self._router_url}/index/stops/{stop_id}/stoptimes", params)

    def geocode(self, text: str) -> HttpRequest:
        return HttpRequest(f"{self._router_url}/geocode", {"query": text, "corners": "false"})
