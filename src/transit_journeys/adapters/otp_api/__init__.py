"""OpenTripPlanner REST adapter."""

from transit_journeys.adapters.otp_api.otp_network_provider import OtpNetworkProvider

__all__ = ["OtpNetworkProvider"]
