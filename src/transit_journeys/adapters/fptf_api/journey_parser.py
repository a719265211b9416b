"""Parser for FPTF journeys (v6.db.transport.rest format)."""

import logging
from datetime import datetime
from typing import Any

from transit_journeys.adapters.fptf_api.location_parser import FptfLocationParser
from transit_journeys.adapters.geometry.polyline import path_from
from transit_journeys.adapters.modes.mode_taxonomy import ModeTaxonomyMapper
from transit_journeys.adapters.time_parsing import from_iso
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.line import Line
from transit_journeys.domain.models.location import Location, LocationType, Point
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.stop import Stop
from transit_journeys.domain.models.trip import Fare, IndividualLeg, Leg, PublicLeg, Trip

logger = logging.getLogger(__name__)


def parse_remarks(remarks: Any) -> str | None:
    """Join the texts of an FPTF remarks list."""
    if not isinstance(remarks, list):
        return None
    texts = [r.get("text") for r in remarks if isinstance(r, dict) and r.get("text")]
    return "\n".join(texts) if texts else None


def parse_geojson_path(polyline: Any) -> list[Point]:
    """Points of a GeoJSON FeatureCollection; coordinates are [lon, lat]."""
    if not isinstance(polyline, dict):
        return []
    points = []
    for feature in polyline.get("features") or []:
        geometry = feature.get("geometry") if isinstance(feature, dict) else None
        if not isinstance(geometry, dict) or geometry.get("type") != "Point":
            continue
        coordinates = geometry.get("coordinates")
        if not isinstance(coordinates, list) or len(coordinates) < 2:
            raise ParserError("GeoJSON point without coordinates")
        points.append(Point(float(coordinates[1]), float(coordinates[0])))
    return points


class FptfJourneyParser:
    """Turns an FPTF journeys response into trips."""

    def __init__(
        self,
        mapper: ModeTaxonomyMapper,
        tables: NetworkTables,
        location_parser: FptfLocationParser | None = None,
    ) -> None:
        self._mapper = mapper
        self._tables = tables
        self._locations = location_parser or FptfLocationParser(tables)

    def parse_trips(
        self, document: dict[str, Any], from_location: Location, to_location: Location
    ) -> list[Trip]:
        """Parse all journeys of a response.

        Raises:
            ParserError: If the journey collection is missing or a journey is malformed.
        """
        journeys = document.get("journeys")
        if not isinstance(journeys, list):
            raise ParserError("Response has no journey collection")
        return [self._parse_journey(j, from_location, to_location) for j in journeys]

    def _parse_journey(
        self, journey: dict[str, Any], from_location: Location, to_location: Location
    ) -> Trip:
        legs_data = journey.get("legs")
        if not isinstance(legs_data, list) or not legs_data:
            raise ParserError("Journey without legs")
        legs = tuple(self.parse_leg(leg) for leg in legs_data)
        public_legs = sum(1 for leg in legs if isinstance(leg, PublicLeg))
        return Trip(
            id=journey.get("refreshToken"),
            from_location=from_location,
            to_location=to_location,
            legs=legs,
            fares=self._parse_fares(journey.get("price")),
            num_changes=max(public_legs - 1, 0),
        )

    def parse_leg(self, leg: dict[str, Any]) -> Leg:
        """Parse one leg: a line object makes it public, a walking/mode marker individual."""
        if isinstance(leg.get("line"), dict):
            return self._parse_public_leg(leg)
        if leg.get("walking"):
            return self._parse_individual_leg(leg, "walking")
        mode = leg.get("mode")
        if mode is not None:
            return self._parse_individual_leg(leg, mode)
        raise ParserError("Leg has neither line nor individual mode")

    def parse_line(self, line: dict[str, Any]) -> Line:
        label = line.get("name")
        operator = line.get("operator")
        network = operator.get("name") if isinstance(operator, dict) else None
        return Line(
            id=line.get("id"),
            network=network or self._tables.network,
            product=self._mapper.decode(line.get("product")),
            label=label,
            name=line.get("productName"),
            style=self._tables.line_style(label),
        )

    def _parse_public_leg(self, leg: dict[str, Any]) -> PublicLeg:
        departure_stop = Stop(
            location=self._locations.parse(leg.get("origin")),
            planned_departure_time=from_iso(leg.get("plannedDeparture")),
            predicted_departure_time=_predicted(leg, "departure"),
            position=leg.get("departurePlatform") or leg.get("plannedDeparturePlatform"),
        )
        arrival_stop = Stop(
            location=self._locations.parse(leg.get("destination")),
            planned_arrival_time=from_iso(leg.get("plannedArrival")),
            predicted_arrival_time=_predicted(leg, "arrival"),
            position=leg.get("arrivalPlatform") or leg.get("plannedArrivalPlatform"),
        )
        stopovers = leg.get("stopovers") or []
        intermediate_stops = tuple(self._parse_stopover(s) for s in stopovers[1:-1])

        direction = leg.get("direction")
        return PublicLeg(
            line=self.parse_line(leg["line"]),
            destination=Location(type=LocationType.ANY, name=direction) if direction else None,
            departure_stop=departure_stop,
            arrival_stop=arrival_stop,
            intermediate_stops=intermediate_stops,
            path=path_from(
                points=parse_geojson_path(leg.get("polyline")),
                boundary=[
                    departure_stop.location.coord,
                    *(stop.location.coord for stop in intermediate_stops),
                    arrival_stop.location.coord,
                ],
            ),
            message=parse_remarks(leg.get("remarks")),
        )

    def _parse_stopover(self, stopover: dict[str, Any]) -> Stop:
        return Stop(
            location=self._locations.parse(stopover.get("stop")),
            planned_arrival_time=from_iso(stopover.get("plannedArrival")),
            predicted_arrival_time=_predicted(stopover, "arrival"),
            planned_departure_time=from_iso(stopover.get("plannedDeparture")),
            predicted_departure_time=_predicted(stopover, "departure"),
            position=stopover.get("departurePlatform") or stopover.get("arrivalPlatform"),
        )

    def _parse_individual_leg(self, leg: dict[str, Any], mode_token: str) -> IndividualLeg:
        mode = self._mapper.decode_individual(mode_token)
        departure = self._locations.parse(leg.get("origin"))
        arrival = self._locations.parse(leg.get("destination"))
        departure_time = from_iso(leg.get("departure") or leg.get("plannedDeparture"))
        arrival_time = from_iso(leg.get("arrival") or leg.get("plannedArrival"))
        if departure_time is None or arrival_time is None:
            raise ParserError(f"{mode.name} leg without departure or arrival time")
        return IndividualLeg(
            mode=mode,
            departure=departure,
            departure_time=departure_time,
            arrival=arrival,
            arrival_time=arrival_time,
            path=path_from(
                points=parse_geojson_path(leg.get("polyline")),
                boundary=[departure.coord, arrival.coord],
            ),
            distance_meters=round(leg.get("distance") or 0),
        )

    @staticmethod
    def _parse_fares(price: Any) -> tuple[Fare, ...]:
        if not isinstance(price, dict) or price.get("amount") is None:
            return ()
        return (
            Fare(
                network=None,
                name=price.get("hint"),
                currency=price.get("currency", "EUR"),
                amount=float(price["amount"]),
            ),
        )


def _predicted(data: dict[str, Any], key: str) -> datetime | None:
    """Realtime value of key, only when the backend reports a delay for it."""
    if data.get(f"{key}Delay") is None:
        return None
    return from_iso(data.get(key))
