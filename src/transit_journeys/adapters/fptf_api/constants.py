"""Constants for the transport.rest adapter.

Uses the Friendly Public Transport Format served by the *.transport.rest APIs.
API Documentation: https://v6.db.transport.rest/api.html
"""

from transit_journeys.adapters.modes.mode_taxonomy import ModeTable
from transit_journeys.domain.models.product import Product
from transit_journeys.domain.models.trip import IndividualMode
from transit_journeys.domain.models.trip_query import Accessibility, WalkSpeed

DEFAULT_BASE_URL = "https://v6.db.transport.rest"

FPTF_MODE_TABLE = ModeTable(
    encodings={
        Product.HIGH_SPEED_TRAIN: ("nationalExpress", "national"),
        Product.REGIONAL_TRAIN: ("regionalExpress", "regional"),
        Product.SUBURBAN_TRAIN: ("suburban",),
        Product.SUBWAY: ("subway",),
        Product.TRAM: ("tram",),
        Product.BUS: ("bus",),
        Product.FERRY: ("ferry",),
        Product.CABLECAR: (),
        Product.ON_DEMAND: ("taxi",),
    },
    # Product names used by other transport.rest instances (e.g. VBB)
    fallbacks={"express": Product.HIGH_SPEED_TRAIN},
    individual_modes={
        "walking": IndividualMode.WALK,
        "bicycle": IndividualMode.BIKE,
        "car": IndividualMode.CAR,
    },
)

WALKING_SPEED = {
    WalkSpeed.SLOW: "slow",
    WalkSpeed.NORMAL: "normal",
    WalkSpeed.FAST: "fast",
}

ACCESSIBILITY = {
    Accessibility.NEUTRAL: "none",
    Accessibility.LIMITED: "partial",
    Accessibility.BARRIER_FREE: "complete",
}

# FPTF location object types
STOP_TYPES = frozenset({"stop", "station"})
LOCATION_TYPE = "location"
