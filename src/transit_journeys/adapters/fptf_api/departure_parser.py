"""Parser for FPTF departure responses (v6.db.transport.rest format)."""

import logging
from typing import Any

from transit_journeys.adapters.fptf_api.journey_parser import FptfJourneyParser, parse_remarks
from transit_journeys.adapters.fptf_api.location_parser import FptfLocationParser
from transit_journeys.adapters.time_parsing import from_iso
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.departure import Departure, LineDestination, StationDepartures
from transit_journeys.domain.models.location import Location, LocationType
from transit_journeys.domain.models.results import QueryDeparturesResult, QueryDeparturesStatus

logger = logging.getLogger(__name__)


class FptfDepartureParser:
    """Parses transport.rest departure responses into station departures."""

    def __init__(
        self, journey_parser: FptfJourneyParser, location_parser: FptfLocationParser
    ) -> None:
        self._journeys = journey_parser
        self._locations = location_parser

    @staticmethod
    def extract_departures(data: Any) -> list[Any]:
        """Departure list of a response; newer APIs wrap it in an object."""
        if isinstance(data, dict):
            departures = data.get("departures")
            if isinstance(departures, list):
                return departures
        elif isinstance(data, list):
            return data
        raise ParserError("Departures response has no departure list")

    def parse_departures(
        self,
        data: Any,
        station_id: str,
        max_departures: int,
        include_equivalent_stations: bool,
    ) -> QueryDeparturesResult:
        """Group departures by stop.

        Without equivalent stations only departures at station_id are kept,
        unless none match (a parent station), then all are reported for it.
        """
        grouped: dict[str, tuple[Location, list[Departure], list[LineDestination]]] = {}

        for entry in self.extract_departures(data):
            if not isinstance(entry, dict):
                raise ParserError("Departure is not an object")
            departure = self._parse_departure(entry)
            if departure is None:
                continue
            stop_data = entry.get("stop")
            location = (
                self._locations.parse(stop_data)
                if stop_data
                else Location(type=LocationType.STATION, id=station_id)
            )
            key = location.id or station_id
            _, departures, lines = grouped.setdefault(key, (location, [], []))
            departures.append(departure)
            line_destination = LineDestination(departure.line, departure.destination)
            if line_destination not in lines:
                lines.append(line_destination)

        if not include_equivalent_stations:
            if station_id in grouped:
                grouped = {station_id: grouped[station_id]}
            elif grouped:
                merged_departures = [d for _, deps, _ in grouped.values() for d in deps]
                merged_lines: list[LineDestination] = []
                for _, _, lines in grouped.values():
                    merged_lines.extend(ld for ld in lines if ld not in merged_lines)
                location = Location(type=LocationType.STATION, id=station_id)
                grouped = {station_id: (location, merged_departures, merged_lines)}

        station_departures = tuple(
            StationDepartures(
                location=location,
                departures=tuple(sorted(departures, key=lambda d: d.time)[:max_departures]),
                lines=tuple(lines),
            )
            for location, departures, lines in grouped.values()
        )
        return QueryDeparturesResult(
            status=QueryDeparturesStatus.OK, station_departures=station_departures
        )

    def _parse_departure(self, entry: dict[str, Any]) -> Departure | None:
        planned = from_iso(entry.get("plannedWhen"))
        predicted = from_iso(entry.get("when")) if entry.get("delay") is not None else None
        if planned is None and predicted is None:
            logger.debug(f"Skipping departure without time: {entry.get('tripId')}")
            return None

        line_data = entry.get("line")
        if not isinstance(line_data, dict):
            raise ParserError("Departure without line")
        direction = entry.get("direction")
        return Departure(
            planned_time=planned,
            predicted_time=predicted,
            line=self._journeys.parse_line(line_data),
            position=entry.get("platform") or entry.get("plannedPlatform"),
            destination=Location(type=LocationType.ANY, name=direction) if direction else None,
            message=parse_remarks(entry.get("remarks")),
        )
