"""Checks on locations passed into queries."""

from transit_journeys.domain.errors import UnresolvedLocationError
from transit_journeys.domain.models.location import Location


def require_identified(*locations: Location | None) -> None:
    """Raise UnresolvedLocationError for any location that must be resolved first."""
    for location in locations:
        if location is not None and not location.is_identified:
            raise UnresolvedLocationError(f"Location is not identified: {location}")
