"""Trip query parameters and the pagination context built from them."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from transit_journeys.domain.models.location import Location
from transit_journeys.domain.models.product import Product


class WalkSpeed(Enum):
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


class Accessibility(Enum):
    NEUTRAL = "neutral"
    LIMITED = "limited"
    BARRIER_FREE = "barrier_free"


class TripOption(Enum):
    BIKE = "bike"


@dataclass(frozen=True)
class TripQuery:
    """Everything needed to (re-)issue one logical trip query."""

    from_location: Location
    via: Location | None
    to_location: Location
    time: datetime
    is_departure: bool = True
    products: frozenset[Product] | None = None
    walk_speed: WalkSpeed = WalkSpeed.NORMAL
    accessibility: Accessibility = Accessibility.NEUTRAL
    options: frozenset[TripOption] = frozenset()


@dataclass(frozen=True)
class PaginationContext:
    """Opaque, immutable continuation token of one trip result.

    Carries the originating query plus either boundary times (time-window
    backends) or server-issued cursors (cursor backends).
    """

    query: TripQuery
    earliest_arrival: datetime | None = None
    latest_departure: datetime | None = None
    earlier_cursor: str | None = None
    later_cursor: str | None = None
    uses_server_cursor: bool = False

    @property
    def can_query_later(self) -> bool:
        if self.uses_server_cursor:
            return self.later_cursor is not None
        return self.latest_departure is not None

    @property
    def can_query_earlier(self) -> bool:
        if self.uses_server_cursor:
            return self.earlier_cursor is not None
        return self.earliest_arrival is not None
