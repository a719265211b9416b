"""MVG API adapter."""

from transit_journeys.adapters.mvg_api.mvg_live_departure_source import MvgLiveDepartureSource

__all__ = ["MvgLiveDepartureSource"]
