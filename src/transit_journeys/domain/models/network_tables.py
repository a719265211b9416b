"""Network lookup tables domain model."""

from dataclasses import dataclass, field

from transit_journeys.domain.models.line import Style
from transit_journeys.domain.models.product import Product


@dataclass(frozen=True)
class NetworkTables:
    """Agency-specific lookup tables injected into parsers and services."""

    network: str | None = None
    known_places: tuple[str, ...] = ()  # Place names that may prefix a station name ("München")
    line_styles: dict[str, Style] = field(default_factory=dict)  # line label -> style
    station_equivalents: dict[str, str] = field(
        default_factory=dict
    )  # name used by one feed -> name used by the other
    live_station_ids: dict[str, str] = field(
        default_factory=dict
    )  # primary station id -> live feed station id
    default_products: frozenset[Product] | None = None  # None means all products

    def split_place_name(self, name: str | None) -> tuple[str | None, str | None]:
        """Split "Place, Name" or "Place Name" (for a known place) into its parts."""
        if not name:
            return None, name
        if ", " in name:
            place, rest = name.split(", ", 1)
            return place.strip() or None, rest.strip()
        for place in self.known_places:
            if name.startswith(place + " ") and len(name) > len(place) + 1:
                return place, name[len(place) + 1 :].strip()
        return None, name

    def line_style(self, label: str | None) -> Style | None:
        if not label:
            return None
        return self.line_styles.get(label)

    def canonical_station_name(self, name: str) -> str:
        """Case-folded name with aliases from the equivalents table resolved."""
        folded = name.strip().casefold()
        for alias, canonical in self.station_equivalents.items():
            if alias.casefold() == folded:
                return canonical.strip().casefold()
        return folded

    def live_station_id(self, station_id: str) -> str:
        return self.live_station_ids.get(station_id, station_id)
