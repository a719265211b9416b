"""Parser for FPTF stops, stations and locations."""

from typing import Any

from transit_journeys.adapters.fptf_api.constants import LOCATION_TYPE, STOP_TYPES
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.location import Location, LocationType, Point
from transit_journeys.domain.models.network_tables import NetworkTables


def parse_point(data: dict[str, Any] | None) -> Point | None:
    """Point of an FPTF location object (latitude/longitude keys)."""
    if not isinstance(data, dict):
        return None
    latitude = data.get("latitude")
    longitude = data.get("longitude")
    if latitude is None or longitude is None:
        return None
    try:
        return Point(float(latitude), float(longitude))
    except (TypeError, ValueError) as e:
        raise ParserError(f"Invalid coordinate {latitude!r},{longitude!r}") from e


class FptfLocationParser:
    """Turns FPTF stops, stations and locations into Locations."""

    def __init__(self, tables: NetworkTables) -> None:
        self._tables = tables

    def parse(self, data: Any) -> Location:
        if not isinstance(data, dict):
            raise ParserError("Location is not an object")
        kind = data.get("type")

        if kind in STOP_TYPES:
            stop_id = data.get("id")
            if not stop_id:
                raise ParserError(f"{kind} without id")
            place, name = self._tables.split_place_name(data.get("name"))
            return Location(
                type=LocationType.STATION,
                id=str(stop_id),
                coord=parse_point(data.get("location")),
                place=place,
                name=name,
            )

        if kind == LOCATION_TYPE:
            point = parse_point(data)
            if data.get("poi"):
                place, name = self._tables.split_place_name(data.get("name"))
                return Location(
                    type=LocationType.POI,
                    id=str(data["id"]) if data.get("id") else None,
                    coord=point,
                    place=place,
                    name=name,
                )
            if data.get("address"):
                place, name = self._tables.split_place_name(data["address"])
                return Location(type=LocationType.ADDRESS, coord=point, place=place, name=name)
            if point is None:
                raise ParserError("Location without coordinate")
            return Location.coordinate(point)

        raise ParserError(f"Unknown location type {kind!r}")
