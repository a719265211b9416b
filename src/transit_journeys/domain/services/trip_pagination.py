"""Earlier/later trip pagination.

Backends either widen the query time window around the trips already seen
(boundary times) or hand out server cursors. Both strategies produce a new
immutable PaginationContext per result; a context is never modified after
it has been returned to a caller.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from transit_journeys.domain.errors import PaginationDirectionError
from transit_journeys.domain.models.trip import Trip
from transit_journeys.domain.models.trip_query import PaginationContext, TripQuery

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")


@dataclass(frozen=True)
class PageCursor:
    """A server-issued cursor together with the direction it pages in."""

    value: str
    later: bool


RequestBuilder = Callable[[TripQuery, PageCursor | None], RequestT]


def _earliest(*times: datetime | None) -> datetime | None:
    present = [t for t in times if t is not None]
    return min(present) if present else None


def _latest(*times: datetime | None) -> datetime | None:
    present = [t for t in times if t is not None]
    return max(present) if present else None


class TripPaginationEngine(Generic[RequestT]):
    """Produces trip requests and the contexts that allow paging through them."""

    def __init__(
        self,
        build_request: RequestBuilder[RequestT],
        time_unit: timedelta = timedelta(minutes=1),
        uses_server_cursor: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            build_request: Turns a query and an optional server cursor into a raw request.
            time_unit: Smallest time step the backend resolves; boundaries are shifted by it.
            uses_server_cursor: Page with server-issued cursors instead of boundary times.
        """
        self._build_request = build_request
        self._time_unit = time_unit
        self._uses_server_cursor = uses_server_cursor

    def initial_query(self, query: TripQuery) -> tuple[RequestT, TripQuery]:
        """Build the request for a fresh query; the query is used verbatim as seed."""
        return self._build_request(query, None), query

    def continue_query(
        self, context: PaginationContext, later: bool
    ) -> tuple[RequestT, TripQuery]:
        """Build the request for the page after (later) or before a previous result."""
        direction = "later" if later else "earlier"

        if context.uses_server_cursor:
            cursor = context.later_cursor if later else context.earlier_cursor
            if cursor is None:
                raise PaginationDirectionError(f"Context does not allow querying {direction} trips")
            return self._build_request(context.query, PageCursor(cursor, later)), context.query

        boundary = context.latest_departure if later else context.earliest_arrival
        if boundary is None:
            raise PaginationDirectionError(f"Context does not allow querying {direction} trips")
        time = boundary + self._time_unit if later else boundary - self._time_unit

        # Later pages look for departures after the boundary, earlier pages for arrivals before it
        seed = replace(context.query, time=time, is_departure=later)
        logger.debug(f"Continuing trip query {direction} at {time.isoformat()}")
        return self._build_request(seed, None), seed

    def build_context(
        self,
        seed: TripQuery,
        trips: Sequence[Trip],
        previous: PaginationContext | None = None,
        earlier_cursor: str | None = None,
        later_cursor: str | None = None,
        later: bool = True,
    ) -> PaginationContext:
        """Create the context for a freshly parsed result.

        Args:
            seed: Query the page was fetched with.
            trips: Trips of the page.
            previous: Context the page was continued from, if any.
            earlier_cursor: Server cursor to the trips before this page.
            later_cursor: Server cursor to the trips after this page.
            later: Direction the page was continued in; only used with previous.
        """
        if self._uses_server_cursor:
            if previous is not None:
                # The outer end of the side not paged towards stays where it was
                if later:
                    earlier_cursor = previous.earlier_cursor
                    later_cursor = later_cursor or previous.later_cursor
                else:
                    later_cursor = previous.later_cursor
                    earlier_cursor = earlier_cursor or previous.earlier_cursor
            return PaginationContext(
                query=seed,
                earlier_cursor=earlier_cursor,
                later_cursor=later_cursor,
                uses_server_cursor=True,
            )

        earliest_arrival = _earliest(*(trip.last_arrival_time for trip in trips))
        latest_departure = _latest(*(trip.first_departure_time for trip in trips))

        if previous is not None:
            # Boundaries only ever widen, so an empty page keeps the previous ones
            earliest_arrival = _earliest(earliest_arrival, previous.earliest_arrival)
            latest_departure = _latest(latest_departure, previous.latest_departure)

        return PaginationContext(
            query=seed,
            earliest_arrival=earliest_arrival,
            latest_departure=latest_departure,
        )
