"""Mode taxonomy mapper.

Each backend names its transport modes differently. A ModeTable describes
one vocabulary: which tokens a product is requested with, how numeric route
types narrow a generic token down, which product an ambiguous token falls
back to, and the closed set of individual (walk/bike/car) tokens.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from transit_journeys.domain.errors import ParserError
from transit_journeys.domain.models.product import Product
from transit_journeys.domain.models.trip import IndividualMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteTypeRange:
    """Numeric route type range, inclusive on both ends."""

    low: int
    high: int
    product: Product

    def __contains__(self, route_type: int) -> bool:
        return self.low <= route_type <= self.high


@dataclass(frozen=True)
class ModeTable:
    """Mode vocabulary of one backend.

    Attributes:
        encodings: Product -> backend tokens, in request order.
        exact_route_types: Route types that map to a product regardless of ranges.
        route_type_ranges: Ranges checked in order after exact values; first match wins.
        fallbacks: Product for tokens that are ambiguous or only occur in responses.
        individual_modes: Closed token table for walking/cycling/driving legs.
        case_sensitive: Whether tokens are compared verbatim.
    """

    encodings: Mapping[Product, tuple[str, ...]]
    exact_route_types: Mapping[int, Product] = field(default_factory=dict)
    route_type_ranges: tuple[RouteTypeRange, ...] = ()
    fallbacks: Mapping[str, Product] = field(default_factory=dict)
    individual_modes: Mapping[str, IndividualMode] = field(default_factory=dict)
    case_sensitive: bool = True


class ModeTaxonomyMapper:
    """Encodes product sets into backend mode strings and decodes backend modes."""

    def __init__(self, table: ModeTable, separator: str = ",") -> None:
        self._table = table
        self._separator = separator

        inverse: dict[str, list[Product]] = {}
        for product, tokens in table.encodings.items():
            for token in tokens:
                products = inverse.setdefault(self._normalize(token), [])
                if product not in products:
                    products.append(product)
        self._inverse = inverse
        self._fallbacks = {self._normalize(k): v for k, v in table.fallbacks.items()}
        self._individual = {self._normalize(k): v for k, v in table.individual_modes.items()}

    @property
    def table(self) -> ModeTable:
        return self._table

    @property
    def encodable_products(self) -> frozenset[Product]:
        """Products the backend has at least one request token for."""
        return frozenset(product for product, tokens in self._table.encodings.items() if tokens)

    def _normalize(self, token: str) -> str:
        token = token.strip()
        return token if self._table.case_sensitive else token.upper()

    def tokens(self, products: Iterable[Product]) -> list[str]:
        """Backend tokens for the requested products, deduplicated in table order."""
        requested = set(products)
        result: list[str] = []
        for product, tokens in self._table.encodings.items():
            if product not in requested:
                continue
            for token in tokens:
                if token not in result:
                    result.append(token)
        return result

    def encode(self, products: Iterable[Product]) -> str:
        """Join the backend tokens for the requested products."""
        return self._separator.join(self.tokens(products))

    def _decode_route_type(self, route_type: int) -> Product | None:
        exact = self._table.exact_route_types.get(route_type)
        if exact is not None:
            return exact
        for rule in self._table.route_type_ranges:
            if route_type in rule:
                return rule.product
        return None

    def decode(self, token: str | None, route_type: int | None = None) -> Product | None:
        """Decode a backend mode, optionally narrowed by a numeric route type.

        Returns None when the product cannot be determined; callers treat that as
        an unspecified product.
        """
        # 0 means the backend sent no route type
        if route_type:
            product = self._decode_route_type(route_type)
            if product is not None:
                return product

        if not token:
            return None

        key = self._normalize(token)
        candidates = self._inverse.get(key, [])
        if len(candidates) == 1:
            return candidates[0]
        fallback = self._fallbacks.get(key)
        if fallback is not None:
            return fallback
        if candidates:
            logger.debug(f"Mode {token!r} is ambiguous ({len(candidates)} products), no fallback")
        else:
            logger.debug(f"Unknown mode {token!r}")
        return None

    def decode_all(self, mode_string: str) -> set[Product]:
        """All products any token of a joined mode string can stand for."""
        products: set[Product] = set()
        for token in mode_string.split(self._separator):
            key = self._normalize(token)
            products.update(self._inverse.get(key, ()))
            fallback = self._fallbacks.get(key)
            if fallback is not None:
                products.add(fallback)
        return products

    def decode_individual(self, token: str | None) -> IndividualMode:
        """Decode an individual mode token from the closed table.

        Raises:
            ParserError: If the token is missing or unknown.
        """
        mode = self._individual.get(self._normalize(token)) if token else None
        if mode is None:
            logger.warning(f"Unknown individual mode {token!r}")
            raise ParserError(f"Unknown individual mode: {token!r}")
        return mode

