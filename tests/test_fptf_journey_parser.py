"""Tests for parsing transport.rest (FPTF) journeys."""

from datetime import UTC, datetime
from typing import Any

import pytest

from transit_journeys.adapters.fptf_api.constants import FPTF_MODE_TABLE
from transit_journeys.adapters.fptf_api.journey_parser import (
    FptfJourneyParser,
    parse_geojson_path,
    parse_remarks,
)
from transit_journeys.adapters.fptf_api.location_parser import FptfLocationParser
from transit_journeys.adapters.modes import ModeTaxonomyMapper
from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models import (
    IndividualLeg,
    IndividualMode,
    Location,
    LocationType,
    NetworkTables,
    Point,
    Product,
    PublicLeg,
)

TABLES = NetworkTables(network="DB", known_places=("München", "Nürnberg"))
FROM = Location(LocationType.STATION, id="8000261")
TO = Location(LocationType.ADDRESS, coord=Point(49.4500, 11.0800), name="Königstraße 1")


def _stop(stop_id: str, name: str, lat: float, lon: float) -> dict[str, Any]:
    return {
        "type": "stop",
        "id": stop_id,
        "name": name,
        "location": {"type": "location", "latitude": lat, "longitude": lon},
    }


MUENCHEN = _stop("8000261", "München Hbf", 48.1402, 11.5583)
INGOLSTADT = _stop("8000183", "Ingolstadt Hbf", 48.7445, 11.4373)
NUERNBERG = _stop("8000284", "Nürnberg Hbf", 49.4459, 11.0826)


def train_leg() -> dict[str, Any]:
    return {
        "origin": MUENCHEN,
        "destination": NUERNBERG,
        "plannedDeparture": "2024-05-06T07:58:00+02:00",
        "departure": "2024-05-06T08:00:00+02:00",
        "departureDelay": 120,
        "plannedArrival": "2024-05-06T09:05:00+02:00",
        "arrival": "2024-05-06T09:05:00+02:00",
        "arrivalDelay": None,
        "departurePlatform": "21",
        "plannedDeparturePlatform": "20",
        "direction": "Berlin Hbf",
        "line": {
            "type": "line",
            "id": "ice-1000",
            "name": "ICE 1000",
            "product": "nationalExpress",
            "productName": "ICE",
            "operator": {"type": "operator", "id": "db", "name": "DB Fernverkehr AG"},
        },
        "stopovers": [
            {"stop": MUENCHEN, "plannedDeparture": "2024-05-06T07:58:00+02:00"},
            {
                "stop": INGOLSTADT,
                "plannedArrival": "2024-05-06T08:30:00+02:00",
                "arrival": "2024-05-06T08:31:00+02:00",
                "arrivalDelay": 60,
                "plannedDeparture": "2024-05-06T08:32:00+02:00",
            },
            {"stop": NUERNBERG, "plannedArrival": "2024-05-06T09:05:00+02:00"},
        ],
        "remarks": [{"type": "hint", "text": "Bordrestaurant"}, {"type": "hint"}],
    }


def walk_leg() -> dict[str, Any]:
    return {
        "origin": NUERNBERG,
        "destination": {
            "type": "location",
            "address": "Nürnberg, Königstraße 1",
            "latitude": 49.4500,
            "longitude": 11.0800,
        },
        "departure": "2024-05-06T09:05:00+02:00",
        "arrival": "2024-05-06T09:15:00+02:00",
        "walking": True,
        "distance": 650,
    }


def journeys_document() -> dict[str, Any]:
    return {
        "journeys": [
            {
                "type": "journey",
                "legs": [train_leg(), walk_leg()],
                "refreshToken": "T$abc",
                "price": {"amount": 29.9, "currency": "EUR", "hint": "Sparpreis"},
            }
        ],
        "earlierRef": "E1",
        "laterRef": "L1",
    }


@pytest.fixture
def parser() -> FptfJourneyParser:
    return FptfJourneyParser(ModeTaxonomyMapper(FPTF_MODE_TABLE), TABLES)


class TestParseTrips:
    def test_journey_becomes_trip(self, parser: FptfJourneyParser) -> None:
        """Given a train plus walk journey, then the trip keeps refresh token and price."""
        (trip,) = parser.parse_trips(journeys_document(), FROM, TO)

        assert trip.id == "T$abc"
        assert trip.num_changes == 0
        assert trip.fares[0].amount == pytest.approx(29.9)
        assert trip.fares[0].name == "Sparpreis"
        assert trip.is_contiguous()
        assert trip.first_departure_time == datetime(2024, 5, 6, 6, 0, tzinfo=UTC)
        assert trip.last_arrival_time == datetime(2024, 5, 6, 7, 15, tzinfo=UTC)

    def test_public_leg_times_and_platform(self, parser: FptfJourneyParser) -> None:
        leg = parser.parse_leg(train_leg())

        assert isinstance(leg, PublicLeg)
        assert leg.departure_stop.planned_departure_time == datetime(2024, 5, 6, 5, 58, tzinfo=UTC)
        assert leg.departure_stop.predicted_departure_time == datetime(
            2024, 5, 6, 6, 0, tzinfo=UTC
        )
        assert leg.arrival_stop.predicted_arrival_time is None
        assert leg.departure_stop.position == "21"
        assert leg.message == "Bordrestaurant"
        assert leg.destination is not None
        assert leg.destination.name == "Berlin Hbf"

    def test_only_inner_stopovers_are_intermediate(self, parser: FptfJourneyParser) -> None:
        """Given stopovers including both ends, then only the inner ones are kept."""
        leg = parser.parse_leg(train_leg())

        assert isinstance(leg, PublicLeg)
        (ingolstadt,) = leg.intermediate_stops
        assert ingolstadt.location.id == "8000183"
        assert ingolstadt.location.name == "Ingolstadt Hbf"
        assert ingolstadt.predicted_arrival_time == datetime(2024, 5, 6, 6, 31, tzinfo=UTC)
        assert ingolstadt.predicted_departure_time is None
        assert len(leg.path) == 3

    def test_line(self, parser: FptfJourneyParser) -> None:
        leg = parser.parse_leg(train_leg())

        assert isinstance(leg, PublicLeg)
        assert leg.line.label == "ICE 1000"
        assert leg.line.product is Product.HIGH_SPEED_TRAIN
        assert leg.line.network == "DB Fernverkehr AG"
        assert leg.line.name == "ICE"

    def test_walking_leg(self, parser: FptfJourneyParser) -> None:
        leg = parser.parse_leg(walk_leg())

        assert isinstance(leg, IndividualLeg)
        assert leg.mode is IndividualMode.WALK
        assert leg.minutes == 10
        assert leg.distance_meters == 650
        assert leg.arrival.type is LocationType.ADDRESS
        assert leg.arrival.place == "Nürnberg"
        assert leg.arrival.name == "Königstraße 1"

    def test_bicycle_mode_leg(self, parser: FptfJourneyParser) -> None:
        data = walk_leg()
        del data["walking"]
        data["mode"] = "bicycle"

        leg = parser.parse_leg(data)

        assert isinstance(leg, IndividualLeg)
        assert leg.mode is IndividualMode.BIKE

    def test_leg_without_line_or_mode_raises(self, parser: FptfJourneyParser) -> None:
        data = walk_leg()
        del data["walking"]

        with pytest.raises(ParserError, match="neither line nor individual mode"):
            parser.parse_leg(data)

    def test_missing_journeys_raises(self, parser: FptfJourneyParser) -> None:
        with pytest.raises(ParserError, match="no journey collection"):
            parser.parse_trips({"message": "oops"}, FROM, TO)

    def test_timestamp_without_offset_raises(self, parser: FptfJourneyParser) -> None:
        data = train_leg()
        data["plannedDeparture"] = "2024-05-06T07:58:00"

        with pytest.raises(ParserError, match="without offset"):
            parser.parse_leg(data)


class TestHelpers:
    def test_parse_remarks_ignores_non_lists(self) -> None:
        assert parse_remarks(None) is None
        assert parse_remarks([{"text": "a"}, {"text": "b"}]) == "a\nb"

    def test_geojson_coordinates_are_lon_lat(self) -> None:
        polyline = {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "geometry": {"type": "Point", "coordinates": [11.5, 48.1]}},
                {"type": "Feature", "geometry": {"type": "LineString", "coordinates": []}},
            ],
        }

        assert parse_geojson_path(polyline) == [Point(48.1, 11.5)]

    def test_location_parser_handles_poi_and_unknown_types(self) -> None:
        locations = FptfLocationParser(TABLES)

        poi = locations.parse(
            {
                "type": "location",
                "poi": True,
                "id": "991",
                "name": "Deutsches Museum",
                "latitude": 48.13,
                "longitude": 11.58,
            }
        )

        assert poi.type is LocationType.POI
        assert poi.id == "991"
        with pytest.raises(ParserError, match="Unknown location type"):
            locations.parse({"type": "region"})

    @pytest.mark.parametrize("latitude", ["north", [48.1]])
    def test_malformed_coordinate_raises_parser_error(self, latitude: Any) -> None:
        """Given a stop with a non-numeric latitude, when parsing, then it is a parse error."""
        locations = FptfLocationParser(TABLES)
        stop = _stop("8000261", "München Hbf", 48.14, 11.56)
        stop["location"]["latitude"] = latitude

        with pytest.raises(ParserError, match="Invalid coordinate"):
            locations.parse(stop)
