"""Request builder for transport.rest APIs."""

from datetime import datetime, tzinfo

from transit_journeys.adapters.fptf_api.constants import ACCESSIBILITY, WALKING_SPEED
from transit_journeys.adapters.http_transport import HttpRequest
from transit_journeys.adapters.modes.mode_taxonomy import ModeTaxonomyMapper
from transit_journeys.adapters.time_parsing import with_timezone
from transit_journeys.domain.errors import UnresolvedLocationError
from transit_journeys.domain.models.location import Location, LocationType, Point
from transit_journeys.domain.models.trip_query import TripOption, TripQuery
from transit_journeys.domain.services.trip_pagination import PageCursor


class FptfRequestBuilder:
    """Builds transport.rest requests."""

    def __init__(
        self,
        base_url: str,
        mapper: ModeTaxonomyMapper,
        timezone: tzinfo,
        language: str = "de",
        results: int = 6,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._mapper = mapper
        self._timezone = timezone
        self._language = language
        self._results = results

    def _time(self, value: datetime) -> str:
        return with_timezone(value, self._timezone).isoformat()

    @staticmethod
    def place(prefix: str, location: Location) -> dict[str, str]:
        """Query parameters describing one journey endpoint."""
        if location.type is LocationType.STATION and location.id:
            return {prefix: location.id}
        if location.coord is None:
            if location.id:
                return {prefix: location.id}
            raise UnresolvedLocationError(f"Location has neither coordinate nor id: {location}")

        params = {
            f"{prefix}.latitude": str(location.coord.lat),
            f"{prefix}.longitude": str(location.coord.lon),
        }
        if location.type is LocationType.POI and location.id:
            params[f"{prefix}.id"] = location.id
            params[f"{prefix}.name"] = location.name or location.id
        else:
            params[f"{prefix}.address"] = location.unique_short_name or (
                f"{location.coord.lat},{location.coord.lon}"
            )
        return params

    def journeys(self, query: TripQuery, cursor: PageCursor | None = None) -> HttpRequest:
        """Journeys request; a cursor replaces the query time."""
        params: dict[str, str] = {
            **self.place("from", query.from_location),
            **self.place("to", query.to_location),
            "results": str(self._results),
            "stopovers": "true",
            "polylines": "true",
            "remarks": "true",
            "language": self._language,
            "walkingSpeed": WALKING_SPEED[query.walk_speed],
            "accessibility": ACCESSIBILITY[query.accessibility],
        }
        if query.via is not None:
            if not query.via.id:
                raise UnresolvedLocationError("Via location must be a station with an id")
            params["via"] = query.via.id

        if cursor is not None:
            params["laterThan" if cursor.later else "earlierThan"] = cursor.value
        elif query.is_departure:
            params["departure"] = self._time(query.time)
        else:
            params["arrival"] = self._time(query.time)

        # Products without a token leave the filter out, so every product is searched
        requested = set(self._mapper.tokens(query.products or ()))
        if requested:
            for token in self._mapper.tokens(self._mapper.table.encodings):
                params[token] = "true" if token in requested else "false"
        if TripOption.BIKE in query.options:
            params["bike"] = "true"
        return HttpRequest(f"{self._base_url}/journeys", params)

    def departures(
        self, station_id: str, when: datetime | None, max_departures: int, duration_minutes: int
    ) -> HttpRequest:
        params = {
            "results": str(max_departures),
            "duration": str(duration_minutes),
            "remarks": "true",
            "language": self._language,
        }
        if when is not None:
            params["when"] = self._time(when)
        return HttpRequest(f"{self._base_url}/stops/{station_id}/departures", params)

    def stop(self, stop_id: str) -> HttpRequest:
        return HttpRequest(f"{self._base_url}/stops/{stop_id}")

    def nearby(
        self, point: Point, max_distance_meters: int, max_results: int, stops: bool, poi: bool
    ) -> HttpRequest:
        params = {
            "latitude": str(point.lat),
            "longitude": str(point.lon),
            "stops": "true" if stops else "false",
            "poi": "true" if poi else "false",
        }
        if max_distance_meters:
            params["distance"] = str(max_distance_meters)
        if max_results:
            params["results"] = str(max_results)
        return HttpRequest(f"{self._base_url}/locations/nearby", params)

    def locations(self, text: str, max_results: int = 10) -> HttpRequest:
        return HttpRequest(
            f"{self._base_url}/locations",
            {
                "query": text,
                "results": str(max_results),
                "stops": "true",
                "addresses": "true",
                "poi": "true",
                "language": self._language,
            },
        )
