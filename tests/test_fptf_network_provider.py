"""Tests for the transport.rest network provider with a fake transport."""

import json
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import pytest

from transit_journeys.adapters.fptf_api import FptfNetworkProvider
from transit_journeys.domain.errors import (
    BackendUnavailableError,
    HttpStatusError,
    PaginationDirectionError,
)
from transit_journeys.domain.models import (
    Location,
    LocationType,
    NearbyLocationsStatus,
    NetworkTables,
    Point,
    Product,
    QueryDeparturesStatus,
    QueryTripsStatus,
    TripQuery,
)

BASE_URL = "https://v6.db.transport.rest"
T0 = datetime(2024, 5, 6, 6, 0, tzinfo=UTC)
FROM = Location(LocationType.STATION, id="8000261")
TO = Location(
    LocationType.ADDRESS, coord=Point(49.45, 11.08), place="Nürnberg", name="Königstr. 1"
)
QUERY = TripQuery(FROM, None, TO, T0)

Handler = Callable[[str, dict[str, str]], Any]


class FakeTransport:
    """Answers requests with a handler and records them."""

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def get_text(self, url: str, params: Mapping[str, str] | None = None) -> str:
        request_params = dict(params or {})
        self.calls.append((url, request_params))
        response = self._handler(url, request_params)
        if isinstance(response, Exception):
            raise response
        return json.dumps(response)


def _walk_journey(departure: str, arrival: str) -> dict[str, Any]:
    return {
        "legs": [
            {
                "origin": {"type": "stop", "id": "8000261", "name": "München Hbf"},
                "destination": {
                    "type": "location",
                    "address": "Nürnberg, Königstr. 1",
                    "latitude": 49.45,
                    "longitude": 11.08,
                },
                "departure": departure,
                "arrival": arrival,
                "walking": True,
            }
        ],
        "refreshToken": f"token-{departure}",
    }


def _journeys(*departures: str, earlier: str | None = "E", later: str | None = "L") -> Any:
    return {
        "journeys": [_walk_journey(d, d.replace("T08", "T09")) for d in departures],
        "earlierRef": earlier,
        "laterRef": later,
    }


def _provider(handler: Handler) -> tuple[FptfNetworkProvider, FakeTransport]:
    transport = FakeTransport(handler)
    provider = FptfNetworkProvider(transport, BASE_URL, NetworkTables(network="DB"))
    return provider, transport


class TestQueryTrips:
    @pytest.mark.asyncio
    async def test_journeys_request_parameters(self) -> None:
        """Given a station and an address, when querying, then both are encoded as params."""
        provider, transport = _provider(lambda url, params: _journeys("2024-05-06T08:00:00+02:00"))

        result = await provider.query_trips(QUERY)

        assert result.status is QueryTripsStatus.OK
        url, params = transport.calls[0]
        assert url == f"{BASE_URL}/journeys"
        assert params["from"] == "8000261"
        assert params["to.latitude"] == "49.45"
        assert params["to.address"] == "Nürnberg, Königstr. 1"
        assert params["departure"] == "2024-05-06T06:00:00+00:00"
        assert "nationalExpress" not in params

    @pytest.mark.asyncio
    async def test_products_are_sent_as_flags(self) -> None:
        provider, transport = _provider(lambda url, params: _journeys("2024-05-06T08:00:00+02:00"))
        query = TripQuery(
            FROM,
            None,
            TO,
            T0,
            is_departure=False,
            products=frozenset({Product.SUBURBAN_TRAIN, Product.BUS}),
        )

        await provider.query_trips(query)

        _, params = transport.calls[0]
        assert params["suburban"] == "true"
        assert params["bus"] == "true"
        assert params["nationalExpress"] == "false"
        assert params["subway"] == "false"
        assert "arrival" in params
        assert "departure" not in params

    @pytest.mark.asyncio
    async def test_products_without_tokens_search_every_product(self) -> None:
        """Given only cable cars, which transport.rest has no flag for, then no filter is sent."""
        provider, transport = _provider(lambda url, params: _journeys("2024-05-06T08:00:00+02:00"))
        query = TripQuery(FROM, None, TO, T0, products=frozenset({Product.CABLECAR}))

        await provider.query_trips(query)

        _, params = transport.calls[0]
        assert "suburban" not in params
        assert "bus" not in params

    @pytest.mark.asyncio
    async def test_cursor_pages_follow_server_refs(self) -> None:
        """Given earlier/later refs, when paging, then the matching cursor param is sent."""
        pages = iter(
            [
                _journeys("2024-05-06T08:00:00+02:00", earlier="E1", later="L1"),
                _journeys("2024-05-06T08:30:00+02:00", earlier="E2", later="L2"),
                _journeys("2024-05-06T07:30:00+02:00", earlier="E3", later=None),
            ]
        )
        provider, transport = _provider(lambda url, params: next(pages))

        first = await provider.query_trips(QUERY)
        assert first.context is not None
        later = await provider.query_more_trips(first.context, later=True)
        assert later.context is not None
        earlier = await provider.query_more_trips(first.context, later=False)

        assert transport.calls[1][1]["laterThan"] == "L1"
        assert "departure" not in transport.calls[1][1]
        assert transport.calls[2][1]["earlierThan"] == "E1"
        assert later.context.later_cursor == "L2"
        assert later.context.earlier_cursor == "E1"
        assert earlier.context is not None
        assert earlier.context.earlier_cursor == "E3"
        assert earlier.context.later_cursor == "L1"

    @pytest.mark.asyncio
    async def test_empty_later_page_without_refs_keeps_paging(self) -> None:
        """Given an empty later page without refs, then the previous cursors stay usable."""
        pages = iter([_journeys("2024-05-06T08:00:00+02:00", earlier="E1", later="L1")])
        provider, transport = _provider(
            lambda url, params: next(pages, _journeys(earlier=None, later=None))
        )

        first = await provider.query_trips(QUERY)
        assert first.context is not None
        empty = await provider.query_more_trips(first.context, later=True)

        assert empty.status is QueryTripsStatus.OK
        assert empty.trips == ()
        assert empty.context is not None
        assert empty.context.can_query_earlier
        assert empty.context.can_query_later
        await provider.query_more_trips(empty.context, later=False)
        assert transport.calls[2][1]["earlierThan"] == "E1"

    @pytest.mark.asyncio
    async def test_missing_cursor_disallows_direction(self) -> None:
        pages = iter([_journeys("2024-05-06T08:00:00+02:00", earlier="E1", later=None)])
        provider, _ = _provider(lambda url, params: next(pages))

        first = await provider.query_trips(QUERY)
        assert first.context is not None

        with pytest.raises(PaginationDirectionError):
            await provider.query_more_trips(first.context, later=True)

    @pytest.mark.asyncio
    async def test_no_journeys_is_no_trips(self) -> None:
        provider, _ = _provider(lambda url, params: _journeys())

        result = await provider.query_trips(QUERY)

        assert result.status is QueryTripsStatus.NO_TRIPS

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (HttpStatusError(400, "Bad Request"), QueryTripsStatus.NO_TRIPS),
            (HttpStatusError(502, "Bad Gateway"), QueryTripsStatus.SERVICE_DOWN),
            (BackendUnavailableError("timeout"), QueryTripsStatus.SERVICE_DOWN),
        ],
    )
    async def test_errors_map_to_status(self, error: Exception, status: QueryTripsStatus) -> None:
        provider, _ = _provider(lambda url, params: error)

        result = await provider.query_trips(QUERY)

        assert result.status is status
        assert result.error is not None

    @pytest.mark.asyncio
    async def test_via_must_be_a_station(self) -> None:
        provider, transport = _provider(lambda url, params: _journeys())
        query = TripQuery(FROM, Location.coordinate(Point(48.7, 11.4)), TO, T0)

        with pytest.raises(ValueError, match="Via location"):
            await provider.query_trips(query)
        assert transport.calls == []


def _departure(trip_id: str, stop_id: str, planned: str | None, delay: int | None) -> dict:
    return {
        "tripId": trip_id,
        "stop": {"type": "stop", "id": stop_id, "name": "München Hbf"},
        "plannedWhen": planned,
        "when": planned,
        "delay": delay,
        "platform": "2",
        "direction": "Messestadt Ost",
        "line": {"type": "line", "id": "u2", "name": "U2", "product": "subway"},
    }


DEPARTURES = {
    "departures": [
        _departure("1", "de:09162:6", "2024-05-06T08:10:00+02:00", 60),
        _departure("2", "de:09162:6:1:1", "2024-05-06T08:05:00+02:00", None),
        _departure("3", "de:09162:6", None, None),
    ]
}


class TestQueryDepartures:
    @pytest.mark.asyncio
    async def test_only_requested_stop_without_equivalents(self) -> None:
        provider, transport = _provider(lambda url, params: DEPARTURES)

        result = await provider.query_departures("de:09162:6", T0, max_departures=5)

        assert result.status is QueryDeparturesStatus.OK
        assert transport.calls[0][0] == f"{BASE_URL}/stops/de:09162:6/departures"
        assert transport.calls[0][1]["duration"] == "60"
        (station,) = result.station_departures
        assert station.location.id == "de:09162:6"
        (departure,) = station.departures
        assert departure.line.label == "U2"
        assert departure.line.product is Product.SUBWAY
        assert departure.predicted_time == datetime(2024, 5, 6, 6, 10, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_equivalent_stations_are_grouped_separately(self) -> None:
        provider, _ = _provider(lambda url, params: DEPARTURES)

        result = await provider.query_departures("de:09162:6", include_equivalent_stations=True)

        assert [s.location.id for s in result.station_departures] == [
            "de:09162:6",
            "de:09162:6:1:1",
        ]

    @pytest.mark.asyncio
    async def test_parent_station_collects_all_departures(self) -> None:
        """Given no departure at the requested id, then all are reported under it, sorted."""
        provider, _ = _provider(lambda url, params: DEPARTURES)

        result = await provider.query_departures("de:09162:6:parent")

        (station,) = result.station_departures
        assert station.location.id == "de:09162:6:parent"
        times = [d.time for d in station.departures]
        assert times == sorted(times)
        assert len(times) == 2

    @pytest.mark.asyncio
    async def test_unknown_station(self) -> None:
        provider, _ = _provider(lambda url, params: HttpStatusError(404, "Not Found"))

        result = await provider.query_departures("nope")

        assert result.status is QueryDeparturesStatus.INVALID_STATION


class TestLocations:
    @pytest.mark.asyncio
    async def test_nearby_requests_stops_only_by_default(self) -> None:
        provider, transport = _provider(
            lambda url, params: [{"type": "stop", "id": "8000261", "name": "München Hbf"}]
        )

        result = await provider.query_nearby_locations(
            set(), Location.coordinate(Point(48.14, 11.56)), max_distance_meters=300
        )

        assert result.status is NearbyLocationsStatus.OK
        _, params = transport.calls[0]
        assert params["stops"] == "true"
        assert params["poi"] == "false"
        assert params["distance"] == "300"

    @pytest.mark.asyncio
    async def test_nearby_without_coordinate_or_id_raises(self) -> None:
        provider, _ = _provider(lambda url, params: [])

        with pytest.raises(ValueError, match="coordinate or station id"):
            await provider.query_nearby_locations(
                set(), Location(LocationType.ANY, name="Hauptbahnhof")
            )

    @pytest.mark.asyncio
    async def test_suggestions_keep_server_order(self) -> None:
        provider, _ = _provider(
            lambda url, params: [
                {"type": "stop", "id": "8000261", "name": "München Hbf"},
                {"type": "location", "address": "Hauptstraße 1", "latitude": 1, "longitude": 2},
            ]
        )

        result = await provider.suggest_locations("Hbf")

        assert [s.priority for s in result.suggested_locations] == [2, 1]
        assert result.locations[0].type is LocationType.STATION
        assert result.locations[1].type is LocationType.ADDRESS
