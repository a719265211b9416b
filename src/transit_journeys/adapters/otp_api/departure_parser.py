"""Parser for OTP stop routes and stoptimes."""

import logging
import re
from typing import Any

from transit_journeys.adapters.modes.mode_taxonomy import ModeTaxonomyMapper
from transit_journeys.adapters.otp_api.constants import PATTERN_DESTINATION_REGEX
from transit_journeys.adapters.time_parsing import from_service_day
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.departure import (
    Departure,
    LineDestination,
    StationDepartures,
)
from transit_journeys.domain.models.line import Line, Style
from transit_journeys.domain.models.location import Location, LocationType
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.results import QueryDeparturesResult, QueryDeparturesStatus

logger = logging.getLogger(__name__)

_PATTERN_DESTINATION = re.compile(PATTERN_DESTINATION_REGEX)


class OtpDepartureParser:
    """Turns OTP routes and stoptimes of a stop into station departures.

    OTP groups stoptimes by pattern. The line of a pattern is the route whose
    id prefixes the pattern id, the destination is read from the pattern
    description.
    """

    def __init__(self, mapper: ModeTaxonomyMapper, tables: NetworkTables) -> None:
        self._mapper = mapper
        self._tables = tables

    def parse_lines(self, routes: Any) -> list[Line]:
        if not isinstance(routes, list):
            raise ParserError("Stop routes response is not a list")
        return [self._parse_route(route) for route in routes]

    def _parse_route(self, route: dict[str, Any]) -> Line:
        route_id = route.get("id")
        if not route_id:
            raise ParserError("Route without id")
        label = route.get("shortName")
        color = route.get("color")
        return Line(
            id=str(route_id),
            network=route.get("agencyName") or self._tables.network,
            product=self._mapper.decode(route.get("mode"), route.get("routeType")),
            label=label,
            name=route.get("longName"),
            style=self._tables.line_style(label) or (Style(f"#{color}") if color else None),
        )

    def parse_departures(
        self, patterns: Any, lines: list[Line], max_departures: int
    ) -> QueryDeparturesResult:
        """Build one StationDepartures per stop id found in the stoptimes."""
        if not isinstance(patterns, list):
            raise ParserError("Stoptimes response is not a list")

        departures_by_stop: dict[str, list[Departure]] = {}
        lines_by_stop: dict[str, list[LineDestination]] = {}

        for entry in patterns:
            pattern = entry.get("pattern") if isinstance(entry, dict) else None
            if not isinstance(pattern, dict) or "id" not in pattern:
                raise ParserError("Stoptimes entry without pattern")
            line = self._find_line(lines, str(pattern["id"]))
            destination = self._parse_destination(pattern.get("desc"))

            for stop_time in entry.get("times") or []:
                stop_id = str(_required(stop_time, "stopId"))
                service_day = _required(stop_time, "serviceDay")
                planned = from_service_day(service_day, stop_time.get("scheduledDeparture"))
                predicted = None
                if stop_time.get("realtime"):
                    predicted = from_service_day(service_day, stop_time.get("realtimeDeparture"))
                if planned is None and predicted is None:
                    raise ParserError(f"Stoptime at {stop_id} without departure time")

                line_destinations = lines_by_stop.setdefault(stop_id, [])
                line_destination = LineDestination(line, destination)
                if line_destination not in line_destinations:
                    line_destinations.append(line_destination)

                departures_by_stop.setdefault(stop_id, []).append(
                    Departure(
                        planned_time=planned,
                        predicted_time=predicted,
                        line=line,
                        position=None,
                        destination=destination,
                    )
                )

        station_departures = tuple(
            StationDepartures(
                location=Location(type=LocationType.STATION, id=stop_id),
                departures=tuple(sorted(departures, key=lambda d: d.time)[:max_departures]),
                lines=tuple(lines_by_stop[stop_id]),
            )
            for stop_id, departures in departures_by_stop.items()
        )
        return QueryDeparturesResult(
            status=QueryDeparturesStatus.OK, station_departures=station_departures
        )

    def _find_line(self, lines: list[Line], pattern_id: str) -> Line:
        for line in lines:
            if line.id and pattern_id.startswith(line.id):
                return line
        logger.debug(f"No route found for pattern {pattern_id}")
        return Line(id=None, network=self._tables.network, product=None, label=None)

    def _parse_destination(self, description: str | None) -> Location | None:
        if not description:
            return None
        match = _PATTERN_DESTINATION.search(description)
        if not match:
            return None
        name, stop_id = match.group(1), match.group(2)
        place_name, short_name = self._tables.split_place_name(name)
        return Location(type=LocationType.STATION, id=stop_id, place=place_name, name=short_name)


def _required(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None:
        raise ParserError(f"Stoptime without {key}")
    return value
