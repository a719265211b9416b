"""Command line interface for querying trips, departures and locations."""

import argparse
import asyncio
import json
import logging
import re
import sys
from dataclasses import fields, is_dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import aiohttp
from pydantic import BaseModel

from transit_journeys.adapters.config import AppConfig
from transit_journeys.domain.errors import TransitJourneysError
from transit_journeys.domain.models.location import Location, LocationType, Point
from transit_journeys.domain.models.results import QueryTripsResult, QueryTripsStatus
from transit_journeys.domain.models.trip_query import TripQuery
from transit_journeys.main import Services, build_services, configure_logging

logger = logging.getLogger(__name__)

_COORDINATE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def to_jsonable(value: Any) -> Any:
    """Convert result objects into JSON-compatible structures."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [to_jsonable(v) for v in value]
        return sorted(items, key=str) if isinstance(value, (set, frozenset)) else items
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value


def parse_location(text: str) -> Location:
    """Location from a CLI argument: "lat,lon", a station id, or free text."""
    match = _COORDINATE.match(text)
    if match:
        return Location.coordinate(Point(float(match.group(1)), float(match.group(2))))
    if ":" in text or text.isdigit():
        return Location(type=LocationType.STATION, id=text)
    return Location(type=LocationType.ANY, name=text)


def parse_time(text: str | None) -> datetime:
    if not text:
        return datetime.now(UTC)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO time: {text}") from None


def without_context(result: QueryTripsResult) -> dict[str, Any]:
    """JSON form of a trip result without its opaque pagination context."""
    data = to_jsonable(result)
    data.pop("context", None)
    return data


def print_json(value: Any) -> None:
    print(json.dumps(to_jsonable(value), indent=2, ensure_ascii=False))


async def query_trips(services: Services, args: argparse.Namespace) -> list[QueryTripsResult]:
    """Run a trip query and page in the requested direction."""
    query = TripQuery(
        from_location=parse_location(args.from_location),
        via=parse_location(args.via) if args.via else None,
        to_location=parse_location(args.to_location),
        time=parse_time(args.at),
        is_departure=not args.arrive,
    )
    result = await services.trips.query_trips(query)
    results = [result]
    later = not args.earlier
    for _ in range(args.more):
        context = result.context
        if result.status is not QueryTripsStatus.OK or context is None:
            break
        if not (context.can_query_later if later else context.can_query_earlier):
            break
        result = await services.trips.query_more_trips(context, later)
        results.append(result)
        if not result.trips:
            break
    return results


async def run(args: argparse.Namespace) -> None:
    config = AppConfig()
    async with aiohttp.ClientSession() as session:
        services = build_services(
            config, session, live_departures=getattr(args, "live", None) or None
        )

        if args.command == "trips":
            results = await query_trips(services, args)
            print_json([without_context(r) for r in results])

        elif args.command == "departures":
            result = await services.departures.query_departures(
                args.station_id,
                max_departures=args.max,
                include_equivalent_stations=args.equivs,
            )
            print_json(result)

        elif args.command == "suggest":
            result = await services.provider.suggest_locations(args.text)
            print_json(result.suggested_locations)

        elif args.command == "nearby":
            result = await services.provider.query_nearby_locations(
                {LocationType.STATION},
                Location.coordinate(Point(args.lat, args.lon)),
                max_distance_meters=args.distance,
                max_results=args.max,
            )
            print_json(result)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transit-journeys",
        description="Query public transport trips, departures and locations",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    trips_parser = subparsers.add_parser("trips", help="Query trips between two locations")
    trips_parser.add_argument("from_location", help="Station id, 'lat,lon' or free text")
    trips_parser.add_argument("to_location", help="Station id, 'lat,lon' or free text")
    trips_parser.add_argument("--via", help="Optional via location")
    trips_parser.add_argument("--at", help="ISO time (default: now)")
    trips_parser.add_argument("--arrive", action="store_true", help="Treat --at as arrival time")
    trips_parser.add_argument(
        "--more", type=int, default=0, help="Number of additional pages to fetch"
    )
    trips_parser.add_argument(
        "--earlier", action="store_true", help="Page towards earlier instead of later trips"
    )

    departures_parser = subparsers.add_parser("departures", help="Show station departures")
    departures_parser.add_argument("station_id", help="Station ID (e.g., de:09162:6)")
    departures_parser.add_argument("--max", type=int, default=10, help="Maximum departures")
    departures_parser.add_argument(
        "--live", action="store_true", help="Merge MVG real-time predictions"
    )
    departures_parser.add_argument(
        "--equivs", action="store_true", help="Include equivalent stations"
    )

    suggest_parser = subparsers.add_parser("suggest", help="Autocomplete a location name")
    suggest_parser.add_argument("text", help="Free-text location fragment")

    nearby_parser = subparsers.add_parser("nearby", help="Find stations near a coordinate")
    nearby_parser.add_argument("lat", type=float, help="Latitude")
    nearby_parser.add_argument("lon", type=float, help="Longitude")
    nearby_parser.add_argument("--distance", type=int, default=0, help="Radius in meters")
    nearby_parser.add_argument("--max", type=int, default=0, help="Maximum results")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point for the CLI command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except (TransitJourneysError, argparse.ArgumentTypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
