"""Departure reconciliation service.

Merges a scheduled departure feed with an independent real-time feed. Live
departures are matched greedily onto the scheduled ones by line, destination
name and time; matched scheduled departures take over the live prediction.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import timedelta

from transit_journeys.domain.models.departure import Departure
from transit_journeys.domain.models.line import Line
from transit_journeys.domain.models.network_tables import NetworkTables

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = timedelta(minutes=2)
SUBSTITUTE_SERVICE_PREFIX = "SEV "
NAME_PREFIX_LENGTH = 3


class DepartureReconciliationService:
    """Matches live departures onto scheduled departures."""

    def __init__(
        self,
        tables: NetworkTables | None = None,
        tolerance: timedelta = DEFAULT_TOLERANCE,
        substitute_prefix: str = SUBSTITUTE_SERVICE_PREFIX,
    ) -> None:
        """Initialize the service.

        Args:
            tables: Network tables providing the station name equivalents.
            tolerance: How far a live departure may precede the scheduled one and still match.
            substitute_prefix: Prefix the live feed puts before the destination of
                substitute services (e.g. "SEV Hauptbahnhof").
        """
        self._tables = tables or NetworkTables()
        self._tolerance = tolerance
        self._substitute_prefix = substitute_prefix.casefold()

    @staticmethod
    def lines_match(primary: Line, live: Line) -> bool:
        """Same label, and same product where both feeds know it.

        Networks are not compared, each feed names its operator differently.
        """
        if primary.label != live.label:
            return False
        if primary.product is None or live.product is None:
            return True
        return primary.product == live.product

    def _names_match(self, primary_name: str, live_name: str) -> bool:
        primary_canonical = self._tables.canonical_station_name(primary_name)
        live_canonical = self._tables.canonical_station_name(live_name)
        if primary_canonical == live_canonical:
            return True

        primary_folded = primary_name.strip().casefold()
        live_folded = live_name.strip().casefold()
        if len(primary_folded) < NAME_PREFIX_LENGTH:
            return False
        prefix = primary_folded[:NAME_PREFIX_LENGTH]
        if live_folded[:NAME_PREFIX_LENGTH] == prefix:
            return True

        if live_folded.startswith(self._substitute_prefix):
            start = len(self._substitute_prefix)
            return live_folded[start : start + NAME_PREFIX_LENGTH] == prefix
        return False

    def destination_matches(self, primary: Departure, live: Departure) -> bool:
        """Whether a live departure may describe the same service as a scheduled one."""
        if not self.lines_match(primary.line, live.line):
            return False
        primary_name = primary.destination.name if primary.destination else None
        live_name = live.destination.name if live.destination else None
        if primary_name is None or live_name is None:
            return primary_name is None and live_name is None
        return self._names_match(primary_name, live_name)

    def reconcile(
        self, primary: Sequence[Departure], live: Sequence[Departure]
    ) -> list[Departure]:
        """Return the primary departures with predictions taken from matching live departures.

        Live departures are processed in order. Each picks the matching primary
        departure with the smallest absolute time difference, provided it does not
        leave more than the tolerance before it. A primary departure keeps the
        prediction of the closest live departure assigned to it so far. Unmatched
        live departures are dropped.
        """
        reconciled = list(primary)
        best_delta_per_primary: dict[int, timedelta] = {}
        min_delta = -self._tolerance

        for live_departure in live:
            best_index: int | None = None
            best_delta: timedelta | None = None
            for index, primary_departure in enumerate(primary):
                if not self.destination_matches(primary_departure, live_departure):
                    continue
                delta = live_departure.time - primary_departure.time
                if delta <= min_delta:
                    continue
                if best_delta is None or abs(delta) < abs(best_delta):
                    best_delta = delta
                    best_index = index

            if best_index is None or best_delta is None:
                logger.debug(
                    f"No scheduled departure for live {live_departure.line.label} "
                    f"at {live_departure.time.isoformat()}"
                )
                continue

            previous_delta = best_delta_per_primary.get(best_index)
            if previous_delta is None or abs(best_delta) < abs(previous_delta):
                reconciled[best_index] = replace(
                    primary[best_index], predicted_time=live_departure.time
                )
                best_delta_per_primary[best_index] = best_delta

        return reconciled
