"""Location domain model."""

from dataclasses import dataclass
from enum import Enum

# Roughly 10 metres at mid latitudes
DEFAULT_COORD_EPSILON = 0.0001


class LocationType(Enum):
    """Kind of place a location refers to."""

    STATION = "station"
    POI = "poi"
    ADDRESS = "address"
    ANY = "any"
    COORDINATE = "coordinate"


@dataclass(frozen=True)
class Point:
    """A WGS84 coordinate in float degrees."""

    lat: float
    lon: float

    @classmethod
    def from_micro_degrees(cls, lat_e6: int, lon_e6: int) -> "Point":
        """Create a point from micro-degree integers."""
        return cls(lat=lat_e6 / 1e6, lon=lon_e6 / 1e6)

    @property
    def lat_e6(self) -> int:
        return round(self.lat * 1e6)

    @property
    def lon_e6(self) -> int:
        return round(self.lon * 1e6)

    def is_near(self, other: "Point", epsilon: float = DEFAULT_COORD_EPSILON) -> bool:
        """Check whether two points lie within epsilon degrees on both axes."""
        return abs(self.lat - other.lat) <= epsilon and abs(self.lon - other.lon) <= epsilon


@dataclass(frozen=True)
class Location:
    """Represents a station, address, POI or bare coordinate."""

    type: LocationType
    id: str | None = None
    coord: Point | None = None
    place: str | None = None
    name: str | None = None

    @classmethod
    def coordinate(cls, point: Point) -> "Location":
        """Create an anonymous location from a coordinate."""
        return cls(type=LocationType.COORDINATE, coord=point)

    @property
    def has_coord(self) -> bool:
        return self.coord is not None

    @property
    def is_identified(self) -> bool:
        """Whether the location can be used in a query without resolving it first."""
        if self.type is LocationType.STATION:
            return bool(self.id)
        if self.type is LocationType.POI:
            return True
        if self.type in (LocationType.ADDRESS, LocationType.COORDINATE):
            return self.has_coord
        return False

    @property
    def unique_short_name(self) -> str | None:
        if self.place and self.name:
            return f"{self.place}, {self.name}"
        if self.name:
            return self.name
        return self.id

    def same_place(self, other: "Location", epsilon: float = DEFAULT_COORD_EPSILON) -> bool:
        """Check whether both locations denote the same real-world place.

        Identified stations are compared by id, everything else by coordinate proximity.
        """
        if self.id and other.id:
            return self.id == other.id
        if self.coord is not None and other.coord is not None:
            return self.coord.is_near(other.coord, epsilon)
        return False
