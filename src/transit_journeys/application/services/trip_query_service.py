"""Trip query service."""

import logging
from dataclasses import replace

from transit_journeys.domain.models.location import Location
from transit_journeys.domain.models.results import QueryTripsResult, QueryTripsStatus
from transit_journeys.domain.models.trip_query import PaginationContext, TripQuery
from transit_journeys.domain.ports.network_provider import NetworkProvider

logger = logging.getLogger(__name__)

_UNKNOWN_STATUS = {
    "from": QueryTripsStatus.UNKNOWN_FROM,
    "via": QueryTripsStatus.UNKNOWN_VIA,
    "to": QueryTripsStatus.UNKNOWN_TO,
}


class TripQueryService:
    """Queries trips, resolving free-text locations through the provider's suggestions."""

    def __init__(self, provider: NetworkProvider) -> None:
        """Initialize with a network provider."""
        self._provider = provider

    async def _candidates(self, location: Location) -> list[Location]:
        """Identified suggestions for an unresolved location."""
        text = location.unique_short_name
        if not text:
            return []
        result = await self._provider.suggest_locations(text)
        return [candidate for candidate in result.locations if candidate.is_identified]

    async def query_trips(self, query: TripQuery) -> QueryTripsResult:
        """Query trips for a query whose locations may still be free text.

        Each unidentified location is resolved through suggestions: no candidate
        yields UNKNOWN_FROM/VIA/TO, a single candidate is used, several make the
        result AMBIGUOUS with the candidates of every unresolved slot.
        """
        slots = {"from": query.from_location, "via": query.via, "to": query.to_location}
        resolved: dict[str, Location | None] = {}
        ambiguous: dict[str, list[Location]] = {}

        for slot, location in slots.items():
            if location is None or location.is_identified:
                resolved[slot] = location
                continue
            candidates = await self._candidates(location)
            if not candidates:
                logger.info(f"No location found for {slot} {location.unique_short_name!r}")
                return QueryTripsResult(_UNKNOWN_STATUS[slot])
            if len(candidates) == 1:
                resolved[slot] = candidates[0]
            else:
                ambiguous[slot] = candidates

        if ambiguous:
            return QueryTripsResult.ambiguous(
                ambiguous.get("from"), ambiguous.get("via"), ambiguous.get("to")
            )

        products = query.products
        if products is None:
            products = self._provider.default_products
        resolved_query = replace(
            query,
            from_location=resolved["from"],
            via=resolved["via"],
            to_location=resolved["to"],
            products=products,
        )
        return await self._provider.query_trips(resolved_query)

    async def query_more_trips(self, context: PaginationContext, later: bool) -> QueryTripsResult:
        """Query trips earlier or later than a previous result."""
        return await self._provider.query_more_trips(context, later)
