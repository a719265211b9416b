#!/usr/bin/env python3
"""Helper script to look up station IDs for the TOML lookup tables."""

import asyncio
import sys

import aiohttp

from transit_journeys.adapters.config import AppConfig
from transit_journeys.domain.models import LocationType
from transit_journeys.main import build_services


async def find_station(text: str) -> None:
    """Print identified stations suggested for text, and a few departures of the best one."""
    print(f"Searching for: {text}")
    async with aiohttp.ClientSession() as session:
        services = build_services(AppConfig(), session, live_departures=False)
        result = await services.provider.suggest_locations(text)
        stations = [s for s in result.locations if s.type is LocationType.STATION and s.id]
        if not stations:
            print(f"Station not found: {text}")
            sys.exit(1)

        for station in stations:
            coord = f"{station.coord.lat}, {station.coord.lon}" if station.coord else "-"
            print(f"  {station.id}  {station.unique_short_name}  ({coord})")

        print("\nSample destinations:")
        departures = await services.provider.query_departures(stations[0].id, max_departures=10)
        seen = set()
        for station_departures in departures.station_departures:
            for dep in station_departures.departures:
                destination = dep.destination.name if dep.destination else "?"
                key = (dep.line.label, destination)
                if key not in seen:
                    print(f"  {dep.line.label} → {destination}")
                    seen.add(key)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python find_station.py <text>")
        print('Example: python find_station.py "München Marienplatz"')
        sys.exit(1)

    asyncio.run(find_station(" ".join(sys.argv[1:])))
