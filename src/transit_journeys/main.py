"""Composition root: wires configuration, transport, providers and services."""

import logging
import sys
from dataclasses import dataclass
from datetime import timedelta

import aiohttp

from transit_journeys.adapters.config import AppConfig, NetworkTablesLoader
from transit_journeys.adapters.fptf_api import FptfNetworkProvider
from transit_journeys.adapters.http_transport import HttpTransport
from transit_journeys.adapters.mvg_api import MvgLiveDepartureSource
from transit_journeys.adapters.otp_api import OtpNetworkProvider
from transit_journeys.application.services import (
    DepartureReconciliationService,
    ReconciledDepartureService,
    TripQueryService,
)
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.ports.network_provider import NetworkProvider

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


@dataclass(frozen=True)
class Services:
    """Everything the CLI needs for one session."""

    provider: NetworkProvider
    trips: TripQueryService
    departures: ReconciledDepartureService


def create_network_provider(
    config: AppConfig, tables: NetworkTables, transport: HttpTransport
) -> NetworkProvider:
    """Create the trip backend selected in the config."""
    if config.backend == "fptf":
        logger.info(f"Using transport.rest backend at {config.fptf_base_url}")
        return FptfNetworkProvider(
            transport,
            config.fptf_base_url,
            tables,
            language=config.locale,
            results=config.num_itineraries,
            timezone=config.timezone,
        )
    logger.info(f"Using OpenTripPlanner backend at {config.otp_base_url}")
    return OtpNetworkProvider(
        transport,
        config.otp_base_url,
        tables,
        router=config.otp_router,
        locale=config.locale,
        num_itineraries=config.num_itineraries,
        timezone=config.timezone,
    )


def build_services(
    config: AppConfig,
    session: aiohttp.ClientSession,
    live_departures: bool | None = None,
) -> Services:
    """Build providers and services sharing one aiohttp session."""
    tables = NetworkTablesLoader.load(config)
    transport = HttpTransport(
        session,
        timeout_seconds=config.http_timeout_seconds,
        min_delay_seconds=config.min_delay_between_requests,
    )
    provider = create_network_provider(config, tables, transport)

    use_live = config.live_departures_enabled if live_departures is None else live_departures
    live_source = MvgLiveDepartureSource(session, tables) if use_live else None
    reconciliation = DepartureReconciliationService(
        tables, tolerance=timedelta(seconds=config.reconciliation_tolerance_seconds)
    )
    return Services(
        provider=provider,
        trips=TripQueryService(provider),
        departures=ReconciledDepartureService(provider, live_source, reconciliation, tables),
    )
