"""Parser for OTP places, nearby stops and geocoder results."""

import logging
from typing import Any

from transit_journeys.adapters.otp_api.constants import VERTEX_TYPE_TRANSIT
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.location import Location, LocationType, Point
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.results import SuggestedLocation

logger = logging.getLogger(__name__)


def _point(data: dict[str, Any], lon_key: str = "lon") -> Point | None:
    lat = data.get("lat")
    lon = data.get(lon_key)
    if lat is None or lon is None:
        return None
    try:
        return Point(float(lat), float(lon))
    except (TypeError, ValueError) as e:
        raise ParserError(f"Invalid coordinate {lat!r},{lon!r}") from e


class OtpLocationParser:
    """Turns OTP place objects into locations."""

    def __init__(self, tables: NetworkTables) -> None:
        self._tables = tables

    def parse_place(self, place: dict[str, Any]) -> Location:
        """Parse the from/to/intermediate place of a leg.

        Transit vertices become stations, other named vertices become
        unidentified places, nameless ones bare coordinates.
        """
        point = _point(place)
        name = place.get("name")
        if not name:
            if point is None:
                raise ParserError("Place has neither name nor coordinate")
            return Location.coordinate(point)

        place_name, short_name = self._tables.split_place_name(name)
        if place.get("vertexType") == VERTEX_TYPE_TRANSIT:
            stop_id = place.get("stopId")
            if not stop_id:
                raise ParserError(f"Transit place {name!r} without stopId")
            return Location(
                type=LocationType.STATION,
                id=str(stop_id),
                coord=point,
                place=place_name,
                name=short_name,
            )
        return Location(type=LocationType.ANY, coord=point, place=place_name, name=short_name)

    def parse_stop(self, stop: dict[str, Any]) -> Location:
        """Parse a stop from the index API."""
        try:
            stop_id = str(stop["id"])
            name = stop["name"]
        except KeyError as e:
            raise ParserError(f"Stop without {e.args[0]}") from e
        place_name, short_name = self._tables.split_place_name(name)
        return Location(
            type=LocationType.STATION,
            id=stop_id,
            coord=_point(stop),
            place=place_name,
            name=short_name,
        )

    def parse_suggestions(self, results: list[Any]) -> list[SuggestedLocation]:
        """Parse geocoder results; list order is the only relevance signal."""
        suggestions = []
        count = len(results)
        for index, result in enumerate(results):
            if not isinstance(result, dict):
                raise ParserError("Geocoder result is not an object")
            suggestions.append(SuggestedLocation(self._parse_suggestion(result), count - index))
        return suggestions

    def _parse_suggestion(self, result: dict[str, Any]) -> Location:
        description = result.get("description")
        if not description:
            raise ParserError("Geocoder result without description")
        kind, _, name = description.partition(" ")
        point = _point(result, lon_key="lng")

        if kind == "stop":
            raw_id = result.get("id")
            if not raw_id:
                raise ParserError(f"Geocoded stop {name!r} without id")
            # Geocoder ids use "_" where the index API uses the first ":"
            stop_id = str(raw_id).replace("_", ":", 1)
            place_name, short_name = self._tables.split_place_name(name)
            return Location(
                type=LocationType.STATION,
                id=stop_id,
                coord=point,
                place=place_name,
                name=short_name,
            )
        if kind == "corner":
            place_name, short_name = self._tables.split_place_name(name)
            return Location(
                type=LocationType.ADDRESS, coord=point, place=place_name, name=short_name
            )
        return Location(type=LocationType.ANY, coord=point, name=name or description)
