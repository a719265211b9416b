"""transport.rest (Friendly Public Transport Format) adapter."""

from transit_journeys.adapters.fptf_api.fptf_network_provider import FptfNetworkProvider

__all__ = ["FptfNetworkProvider"]
