"""Line domain model."""

from dataclasses import dataclass, field

from transit_journeys.domain.models.product import Product


@dataclass(frozen=True)
class Style:
    """Opaque line style as supplied by a network's colour table or the backend."""

    background_color: str | None = None
    foreground_color: str | None = None


@dataclass(frozen=True)
class Line:
    """A transit line.

    Two lines are equal when network, product and label match. Ids, long names
    and styles differ between independent feeds for the same physical line.
    """

    id: str | None = field(compare=False)
    network: str | None
    product: Product | None
    label: str | None
    name: str | None = field(default=None, compare=False)
    style: Style | None = field(default=None, compare=False)
