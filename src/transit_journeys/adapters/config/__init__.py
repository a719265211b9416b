"""Configuration adapters."""

from transit_journeys.adapters.config.app_config import AppConfig
from transit_journeys.adapters.config.network_tables_loader import NetworkTablesLoader

__all__ = ["AppConfig", "NetworkTablesLoader"]
