"""Departures enriched with real-time predictions from a live feed."""

import logging
from dataclasses import replace
from datetime import datetime

from transit_journeys.application.services.departure_reconciliation_service import (
    DepartureReconciliationService,
)
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.results import QueryDeparturesResult, QueryDeparturesStatus
from transit_journeys.domain.ports.live_departure_source import LiveDepartureSource
from transit_journeys.domain.ports.network_provider import NetworkProvider

logger = logging.getLogger(__name__)

# Live feeds list departures of all lines, fetch more to cover the scheduled ones
LIVE_FETCH_FACTOR = 2


class ReconciledDepartureService:
    """Queries scheduled departures and merges live predictions into them."""

    def __init__(
        self,
        provider: NetworkProvider,
        live_source: LiveDepartureSource | None,
        reconciliation: DepartureReconciliationService,
        tables: NetworkTables | None = None,
    ) -> None:
        self._provider = provider
        self._live_source = live_source
        self._reconciliation = reconciliation
        self._tables = tables or NetworkTables()

    async def query_departures(
        self,
        station_id: str,
        time: datetime | None = None,
        max_departures: int = 10,
        include_equivalent_stations: bool = False,
    ) -> QueryDeparturesResult:
        result = await self._provider.query_departures(
            station_id, time, max_departures, include_equivalent_stations
        )
        if (
            self._live_source is None
            or result.status is not QueryDeparturesStatus.OK
            or not result.station_departures
            or not result.station_departures[0].departures
        ):
            return result

        live_station_id = self._tables.live_station_id(station_id)
        try:
            live = await self._live_source.get_departures(
                live_station_id, limit=max_departures * LIVE_FETCH_FACTOR, time=time
            )
        except Exception as e:
            logger.warning(f"Live departures for {live_station_id} unavailable: {e}")
            return result

        first, *others = result.station_departures
        departures = self._reconciliation.reconcile(first.departures, live)
        logger.debug(
            f"Reconciled {len(live)} live departure(s) into {len(departures)} for {station_id}"
        )
        return replace(
            result,
            station_departures=(replace(first, departures=tuple(departures)), *others),
        )
