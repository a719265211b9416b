"""Constants for the OpenTripPlanner adapter.

Targets the OTP 1.x REST API (routers/{router}/plan, index, geocode).
"""

from transit_journeys.adapters.modes.mode_taxonomy import ModeTable, RouteTypeRange
from transit_journeys.domain.models.product import Product
from transit_journeys.domain.models.results import QueryTripsStatus
from transit_journeys.domain.models.trip import IndividualMode
from transit_journeys.domain.models.trip_query import WalkSpeed

SERVER_PRODUCT = "otp"

# Individual mode tokens prefixed to the transit modes of a plan request
MODE_WALK = "WALK"
MODE_BICYCLE = "BICYCLE"
MODE_ALL_TRANSIT = "TRANSIT"

OTP_MODE_TABLE = ModeTable(
    encodings={
        Product.HIGH_SPEED_TRAIN: ("RAIL",),
        Product.REGIONAL_TRAIN: ("RAIL",),
        Product.SUBURBAN_TRAIN: ("RAIL",),
        Product.SUBWAY: ("SUBWAY",),
        Product.TRAM: ("TRAM",),
        Product.BUS: ("BUS",),
        Product.FERRY: ("FERRY",),
        Product.CABLECAR: ("CABLE_CAR", "GONDOLA", "FUNICULAR"),
        Product.ON_DEMAND: (),
    },
    # Bürgerbus, demand responsive service and ridesharing
    exact_route_types={707: Product.ON_DEMAND, 715: Product.ON_DEMAND, 1700: Product.ON_DEMAND},
    route_type_ranges=(
        RouteTypeRange(100, 106, Product.HIGH_SPEED_TRAIN),
        RouteTypeRange(106, 109, Product.REGIONAL_TRAIN),
        RouteTypeRange(109, 112, Product.SUBURBAN_TRAIN),
        RouteTypeRange(300, 400, Product.SUBURBAN_TRAIN),
        RouteTypeRange(112, 200, Product.REGIONAL_TRAIN),
        RouteTypeRange(200, 300, Product.BUS),
        RouteTypeRange(400, 700, Product.SUBWAY),
        RouteTypeRange(700, 900, Product.BUS),
        RouteTypeRange(900, 1000, Product.TRAM),
        RouteTypeRange(1000, 1100, Product.FERRY),
        RouteTypeRange(1200, 1300, Product.FERRY),
        RouteTypeRange(1300, 1500, Product.CABLECAR),
    ),
    fallbacks={"RAIL": Product.REGIONAL_TRAIN},
    individual_modes={
        "WALK": IndividualMode.WALK,
        "BICYCLE": IndividualMode.BIKE,
        "CAR": IndividualMode.CAR,
    },
    case_sensitive=False,
)

WALK_SPEED_METERS_PER_SECOND = {
    WalkSpeed.SLOW: 1.0,
    WalkSpeed.NORMAL: 1.33,
    WalkSpeed.FAST: 1.77,
}

DEFAULT_NEARBY_RADIUS_METERS = 5000

VERTEX_TYPE_TRANSIT = "TRANSIT"

# Plan error ids -> trip query status; unknown ids count as NO_TRIPS
PLAN_ERROR_STATUS = {
    "PATH_NOT_FOUND": QueryTripsStatus.NO_TRIPS,
    "OUTSIDE_BOUNDS": QueryTripsStatus.NO_TRIPS,
    "LOCATION_NOT_ACCESSIBLE": QueryTripsStatus.NO_TRIPS,
    "TOO_CLOSE": QueryTripsStatus.TOO_CLOSE,
    "NO_TRANSIT_TIMES": QueryTripsStatus.INVALID_DATE,
    "SYSTEM_ERROR": QueryTripsStatus.SERVICE_DOWN,
    "GRAPH_UNAVAILABLE": QueryTripsStatus.SERVICE_DOWN,
}

# Pattern descriptions read like "U1 to Olympia-Einkaufszentrum (de:09162:350) from Mangfallplatz"
PATTERN_DESTINATION_REGEX = r" to (.*) \((.*)\) from .*"
