"""Adapters layer - external system integrations."""

from transit_journeys.adapters.config import AppConfig, NetworkTablesLoader
from transit_journeys.adapters.fptf_api import FptfNetworkProvider
from transit_journeys.adapters.http_transport import HttpTransport
from transit_journeys.adapters.mvg_api import MvgLiveDepartureSource
from transit_journeys.adapters.otp_api import OtpNetworkProvider

__all__ = [
    "AppConfig",
    "FptfNetworkProvider",
    "HttpTransport",
    "MvgLiveDepartureSource",
    "NetworkTablesLoader",
    "OtpNetworkProvider",
]
