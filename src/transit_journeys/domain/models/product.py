"""Product (canonical transport mode) domain model."""

from enum import Enum


class Product(Enum):
    """Canonical transport mode taxonomy shared by all backends."""

    HIGH_SPEED_TRAIN = "I"
    REGIONAL_TRAIN = "R"
    SUBURBAN_TRAIN = "S"
    SUBWAY = "U"
    TRAM = "T"
    BUS = "B"
    FERRY = "F"
    CABLECAR = "C"
    ON_DEMAND = "P"

    @classmethod
    def all(cls) -> frozenset["Product"]:
        return frozenset(cls)

    @classmethod
    def from_code(cls, code: str) -> "Product":
        """Look up a product by its one-letter code."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown product code: {code!r}") from None
