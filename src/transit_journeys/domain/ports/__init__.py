"""Ports (interfaces) for the ports-and-adapters architecture."""

from transit_journeys.domain.ports.live_departure_source import LiveDepartureSource
from transit_journeys.domain.ports.network_provider import NetworkProvider
from transit_journeys.domain.ports.text_transport import TextTransport

__all__ = [
    "LiveDepartureSource",
    "NetworkProvider",
    "TextTransport",
]
