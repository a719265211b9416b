"""Network lookup tables loader."""

import logging
from typing import Any

from transit_journeys.adapters.config.app_config import AppConfig
from transit_journeys.domain.models.line import Style
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.product import Product

logger = logging.getLogger(__name__)


class NetworkTablesLoader:
    """Loads network lookup tables from the TOML config file."""

    @staticmethod
    def load(config: AppConfig) -> NetworkTables:
        """Load lookup tables from app config."""
        return NetworkTablesLoader.from_toml_data(config.load_toml_data(), config.network)

    @staticmethod
    def from_toml_data(toml_data: dict[str, Any], network: str | None = None) -> NetworkTables:
        """Build lookup tables from already parsed TOML data."""
        network_data = toml_data.get("network", {})
        if not isinstance(network_data, dict):
            raise ValueError("TOML config 'network' must be a table")

        known_places = network_data.get("known_places", [])
        if not isinstance(known_places, list):
            raise ValueError("TOML config 'network.known_places' must be a list")
        # Longest first so "Garching-Hochbrück" wins over "Garching"
        places = tuple(sorted((str(p) for p in known_places), key=len, reverse=True))

        default_products = None
        codes = network_data.get("default_products")
        if codes is not None:
            if not isinstance(codes, list):
                raise ValueError("TOML config 'network.default_products' must be a list")
            default_products = frozenset(Product.from_code(str(code)) for code in codes)

        line_styles: dict[str, Style] = {}
        for label, style_data in toml_data.get("line_styles", {}).items():
            if not isinstance(style_data, dict):
                logger.warning(f"Ignoring line style for {label!r}: expected a table")
                continue
            line_styles[str(label)] = Style(
                background_color=style_data.get("background"),
                foreground_color=style_data.get("foreground"),
            )

        tables = NetworkTables(
            network=network_data.get("name", network),
            known_places=places,
            line_styles=line_styles,
            station_equivalents=_string_table(toml_data, "station_equivalents"),
            live_station_ids=_string_table(toml_data, "live_station_ids"),
            default_products=default_products,
        )
        logger.info(
            f"Loaded network tables for {tables.network or 'unnamed network'}: "
            f"{len(tables.known_places)} place(s), {len(tables.line_styles)} line style(s), "
            f"{len(tables.station_equivalents)} station equivalent(s)"
        )
        return tables


def _string_table(toml_data: dict[str, Any], key: str) -> dict[str, str]:
    table = toml_data.get(key, {})
    if not isinstance(table, dict):
        raise ValueError(f"TOML config '{key}' must be a table")
    return {str(k): str(v) for k, v in table.items()}
