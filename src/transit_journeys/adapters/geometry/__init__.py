"""Path geometry decoding."""

from transit_journeys.adapters.geometry.polyline import decode, encode, path_from

__all__ = ["decode", "encode", "path_from"]
