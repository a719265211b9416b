"""Mapping between canonical products and backend mode vocabularies."""

from transit_journeys.adapters.modes.mode_taxonomy import (
    ModeTable,
    ModeTaxonomyMapper,
    RouteTypeRange,
)

__all__ = ["ModeTable", "ModeTaxonomyMapper", "RouteTypeRange"]
