"""Tests for CLI helper functions."""

import json
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest

from transit_journeys.cli import (
    create_parser,
    main,
    parse_location,
    parse_time,
    query_trips,
    to_jsonable,
    without_context,
)
from transit_journeys.domain.models import (
    ErrorDetails,
    IndividualLeg,
    IndividualMode,
    Location,
    LocationType,
    PaginationContext,
    Point,
    Product,
    QueryTripsResult,
    QueryTripsStatus,
    Trip,
    TripQuery,
)

T0 = datetime(2024, 5, 6, 6, 0, tzinfo=UTC)
FROM = Location(LocationType.STATION, id="de:09162:2")
TO = Location(LocationType.STATION, id="de:09162:6")


def _trip(minutes: int) -> Trip:
    leg = IndividualLeg(
        IndividualMode.WALK,
        FROM,
        T0 + timedelta(minutes=minutes),
        TO,
        T0 + timedelta(minutes=minutes + 12),
    )
    return Trip(None, FROM, TO, (leg,))


class TestParseLocation:
    def test_coordinate(self) -> None:
        assert parse_location("48.137, 11.575") == Location.coordinate(Point(48.137, 11.575))

    def test_negative_coordinate(self) -> None:
        assert parse_location("-33.86,151.2").coord == Point(-33.86, 151.2)

    @pytest.mark.parametrize("text", ["de:09162:6", "8000261"])
    def test_station_id(self, text: str) -> None:
        assert parse_location(text) == Location(LocationType.STATION, id=text)

    def test_free_text(self) -> None:
        location = parse_location("Marienplatz")

        assert location.type is LocationType.ANY
        assert location.name == "Marienplatz"
        assert not location.is_identified


class TestParseTime:
    def test_iso_time(self) -> None:
        assert parse_time("2024-05-06T08:00:00+02:00") == T0

    def test_missing_time_is_now(self) -> None:
        assert abs(parse_time(None) - datetime.now(UTC)) < timedelta(seconds=5)


class TestToJsonable:
    def test_trip_result_is_serializable(self) -> None:
        """Given a result with enums, datetimes and tuples, then json.dumps accepts it."""
        result = QueryTripsResult.ok([_trip(0)], PaginationContext(TripQuery(FROM, None, TO, T0)))

        data = without_context(result)

        assert "context" not in data
        assert data["status"] == "OK"
        leg = data["trips"][0]["legs"][0]
        assert leg["mode"] == "WALK"
        assert leg["departure_time"] == "2024-05-06T06:00:00+00:00"
        json.dumps(data)

    def test_pydantic_and_sets(self) -> None:
        data = to_jsonable(
            {
                "error": ErrorDetails(status_code=503, reason="down"),
                "products": frozenset({Product.TRAM, Product.BUS}),
            }
        )

        assert data["error"] == {"status_code": 503, "reason": "down"}
        assert data["products"] == ["BUS", "TRAM"]


class MockTripService:
    """Returns queued results and records paging directions."""

    def __init__(self, results: list[QueryTripsResult]) -> None:
        self.results = results
        self.directions: list[bool] = []

    async def query_trips(self, query: TripQuery) -> QueryTripsResult:  # noqa: ARG002
        return self.results.pop(0)

    async def query_more_trips(
        self, context: PaginationContext, later: bool  # noqa: ARG002
    ) -> QueryTripsResult:
        self.directions.append(later)
        return self.results.pop(0)


async def _run(trips: MockTripService, *argv: str) -> list[QueryTripsResult]:
    args = create_parser().parse_args(["trips", "de:09162:2", "de:09162:6", *argv])
    return await query_trips(SimpleNamespace(trips=trips), args)  # type: ignore[arg-type]


class TestQueryTrips:
    @pytest.mark.asyncio
    async def test_fetches_requested_number_of_pages(self) -> None:
        query = TripQuery(FROM, None, TO, T0)
        context = PaginationContext(query, earliest_arrival=T0, latest_departure=T0)
        trips = MockTripService([QueryTripsResult.ok([_trip(i)], context) for i in range(3)])

        results = await _run(trips, "--more", "2", "--earlier")

        assert len(results) == 3
        assert trips.directions == [False, False]

    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self) -> None:
        query = TripQuery(FROM, None, TO, T0)
        context = PaginationContext(query, earliest_arrival=T0, latest_departure=T0)
        trips = MockTripService(
            [
                QueryTripsResult.ok([_trip(0)], context),
                QueryTripsResult.ok([], context),
                QueryTripsResult.ok([_trip(5)], context),
            ]
        )

        results = await _run(trips, "--more", "5")

        assert len(results) == 2
        assert trips.directions == [True]

    @pytest.mark.asyncio
    async def test_does_not_page_after_failure(self) -> None:
        trips = MockTripService([QueryTripsResult(QueryTripsStatus.AMBIGUOUS)])

        results = await _run(trips, "--more", "3")

        assert [r.status for r in results] == [QueryTripsStatus.AMBIGUOUS]
        assert trips.directions == []


class TestParser:
    def test_departures_arguments(self) -> None:
        args = create_parser().parse_args(["departures", "de:09162:6", "--max", "5", "--live"])

        assert args.command == "departures"
        assert args.max == 5
        assert args.live is True
        assert args.equivs is False

    def test_nearby_arguments(self) -> None:
        args = create_parser().parse_args(["nearby", "48.1", "11.5", "--distance", "250"])

        assert (args.lat, args.lon, args.distance) == (48.1, 11.5, 250)

    def test_missing_command_exits(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
