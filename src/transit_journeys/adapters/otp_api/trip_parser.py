"""Parser for OTP plan responses (itineraries and legs)."""

import logging
from datetime import datetime, timedelta
from typing import Any

from transit_journeys.adapters.geometry.polyline import path_from
from transit_journeys.adapters.modes.mode_taxonomy import ModeTaxonomyMapper
from transit_journeys.adapters.otp_api.location_parser import OtpLocationParser
from transit_journeys.adapters.time_parsing import from_epoch_millis
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.line import Line, Style
from transit_journeys.domain.models.location import Location, LocationType
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.stop import Stop
from transit_journeys.domain.models.trip import (
    Fare,
    IndividualLeg,
    Leg,
    PublicLeg,
    Trip,
)

logger = logging.getLogger(__name__)


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    value = data.get(key)
    if value is None:
        raise ParserError(f"{what} without {key}")
    return value


def _planned_and_predicted(
    value: datetime | None, delay_seconds: int, realtime: bool
) -> tuple[datetime | None, datetime | None]:
    """Split a (realtime adjusted) time into planned and predicted parts."""
    if value is None or not realtime:
        return value, None
    return value - timedelta(seconds=delay_seconds), value


class OtpTripParser:
    """Turns OTP plan documents into trips."""

    def __init__(
        self,
        mapper: ModeTaxonomyMapper,
        tables: NetworkTables,
        location_parser: OtpLocationParser | None = None,
    ) -> None:
        self._mapper = mapper
        self._tables = tables
        self._locations = location_parser or OtpLocationParser(tables)

    def parse_trips(
        self, document: dict[str, Any], from_location: Location, to_location: Location
    ) -> list[Trip]:
        """Parse all itineraries of a plan document.

        The caller's from/to locations are carried into every trip.

        Raises:
            ParserError: If the plan or its itinerary collection is missing or malformed.
        """
        plan = document.get("plan")
        if not isinstance(plan, dict):
            raise ParserError("Response has no plan")
        itineraries = plan.get("itineraries")
        if not isinstance(itineraries, list):
            raise ParserError("Plan has no itinerary collection")

        return [self._parse_itinerary(i, from_location, to_location) for i in itineraries]

    def _parse_itinerary(
        self, itinerary: dict[str, Any], from_location: Location, to_location: Location
    ) -> Trip:
        legs_data = itinerary.get("legs")
        if not isinstance(legs_data, list) or not legs_data:
            raise ParserError("Itinerary without legs")
        legs = tuple(self.parse_leg(leg) for leg in legs_data)
        return Trip(
            id=None,
            from_location=from_location,
            to_location=to_location,
            legs=legs,
            fares=self._parse_fares(itinerary.get("fare")),
            num_changes=itinerary.get("transfers"),
        )

    def parse_leg(self, leg: dict[str, Any]) -> Leg:
        """Parse one leg, dispatching on the transitLeg flag."""
        transit_leg = leg.get("transitLeg")
        if transit_leg is None:
            raise ParserError("Leg without transitLeg marker")
        if transit_leg:
            return self._parse_public_leg(leg)
        return self._parse_individual_leg(leg)

    def _parse_public_leg(self, leg: dict[str, Any]) -> PublicLeg:
        realtime = bool(leg.get("realTime", False))
        departure_stop = self._parse_stop(
            _require(leg, "from", "Leg"), leg.get("departureDelay", 0), realtime
        )
        arrival_stop = self._parse_stop(
            _require(leg, "to", "Leg"), leg.get("arrivalDelay", 0), realtime
        )
        intermediate_stops = tuple(
            self._parse_stop(stop, 0, False) for stop in leg.get("intermediateStops") or []
        )
        geometry = leg.get("legGeometry") or {}
        path = path_from(
            encoded=geometry.get("points"),
            boundary=[
                departure_stop.location.coord,
                *(stop.location.coord for stop in intermediate_stops),
                arrival_stop.location.coord,
            ],
        )
        headsign = leg.get("headsign")
        destination = Location(type=LocationType.ANY, name=headsign) if headsign else None
        return PublicLeg(
            line=self.parse_line(leg),
            destination=destination,
            departure_stop=departure_stop,
            arrival_stop=arrival_stop,
            intermediate_stops=intermediate_stops,
            path=path,
            message=self._parse_message(leg.get("alerts")),
        )

    def parse_line(self, leg: dict[str, Any]) -> Line:
        """Line of a transit leg."""
        label = leg.get("routeShortName")
        return Line(
            id=leg.get("routeId"),
            network=leg.get("agencyName") or self._tables.network,
            product=self._mapper.decode(leg.get("mode"), leg.get("routeType")),
            label=label,
            name=leg.get("routeLongName"),
            style=self._tables.line_style(label)
            or _route_style(leg.get("routeColor"), leg.get("routeTextColor")),
        )

    def _parse_stop(self, place: dict[str, Any], delay_seconds: int, realtime: bool) -> Stop:
        planned_arrival, predicted_arrival = _planned_and_predicted(
            from_epoch_millis(place.get("arrival")), delay_seconds, realtime
        )
        planned_departure, predicted_departure = _planned_and_predicted(
            from_epoch_millis(place.get("departure")), delay_seconds, realtime
        )
        return Stop(
            location=self._locations.parse_place(place),
            planned_arrival_time=planned_arrival,
            predicted_arrival_time=predicted_arrival,
            planned_departure_time=planned_departure,
            predicted_departure_time=predicted_departure,
            position=place.get("platformCode"),
        )

    def _parse_individual_leg(self, leg: dict[str, Any]) -> IndividualLeg:
        mode = self._mapper.decode_individual(leg.get("mode"))
        from_place = _require(leg, "from", "Leg")
        to_place = _require(leg, "to", "Leg")
        departure = self._locations.parse_place(from_place)
        arrival = self._locations.parse_place(to_place)
        departure_time = from_epoch_millis(from_place.get("departure", leg.get("startTime")))
        arrival_time = from_epoch_millis(to_place.get("arrival", leg.get("endTime")))
        if departure_time is None or arrival_time is None:
            raise ParserError(f"{mode.name} leg without departure or arrival time")
        geometry = leg.get("legGeometry") or {}
        return IndividualLeg(
            mode=mode,
            departure=departure,
            departure_time=departure_time,
            arrival=arrival,
            arrival_time=arrival_time,
            path=path_from(
                encoded=geometry.get("points"), boundary=[departure.coord, arrival.coord]
            ),
            distance_meters=round(leg.get("distance") or 0),
        )

    @staticmethod
    def _parse_message(alerts: Any) -> str | None:
        if not isinstance(alerts, list):
            return None
        texts = [a.get("alertHeaderText") for a in alerts if isinstance(a, dict)]
        texts = [t for t in texts if t]
        return "\n".join(texts) if texts else None

    @staticmethod
    def _parse_fares(fare_data: Any) -> tuple[Fare, ...]:
        """Pass the itinerary's fare table through unchanged."""
        if not isinstance(fare_data, dict):
            return ()
        fares = []
        for name, fare in (fare_data.get("fare") or {}).items():
            if not isinstance(fare, dict) or "cents" not in fare:
                continue
            currency = (fare.get("currency") or {}).get("currencyCode", "EUR")
            fares.append(
                Fare(network=None, name=name, currency=currency, amount=fare["cents"] / 100)
            )
        return tuple(fares)


def _route_style(background: str | None, foreground: str | None) -> Style | None:
    if not background:
        return None
    return Style(
        background_color=f"#{background}",
        foreground_color=f"#{foreground}" if foreground else None,
    )
