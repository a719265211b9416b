"""Pure domain services shared by all backends."""

from transit_journeys.domain.services.location_policy import require_identified
from transit_journeys.domain.services.trip_pagination import PageCursor, TripPaginationEngine

__all__ = ["PageCursor", "TripPaginationEngine", "require_identified"]
