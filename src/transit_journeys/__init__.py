"""Transit journeys - query public transport backends and normalize their itineraries."""

__version__ = "0.1.0"
