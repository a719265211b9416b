"""Domain layer - core models, ports and pure services."""

from transit_journeys.domain.models import (
    Departure,
    Line,
    Location,
    LocationType,
    PaginationContext,
    Point,
    Product,
    Trip,
    TripQuery,
)
from transit_journeys.domain.ports import (
    LiveDepartureSource,
    NetworkProvider,
    TextTransport,
)

__all__ = [
    "Departure",
    "Line",
    "LiveDepartureSource",
    "Location",
    "LocationType",
    "NetworkProvider",
    "PaginationContext",
    "Point",
    "Product",
    "TextTransport",
    "Trip",
    "TripQuery",
]
