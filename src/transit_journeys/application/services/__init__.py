"""Application services."""

from transit_journeys.application.services.departure_reconciliation_service import (
    DepartureReconciliationService,
)
from transit_journeys.application.services.reconciled_departure_service import (
    ReconciledDepartureService,
)
from transit_journeys.application.services.trip_query_service import TripQueryService

__all__ = [
    "DepartureReconciliationService",
    "ReconciledDepartureService",
    "TripQueryService",
]
