"""Tests for configuration adapter."""

from pathlib import Path

import pytest

from transit_journeys.adapters.config import AppConfig, NetworkTablesLoader
from transit_journeys.domain.models.line import Style
from transit_journeys.domain.models.product import Product


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer .env files and TJ_ variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("TJ_BACKEND", "TJ_TIMEZONE", "TJ_CONFIG_FILE", "TJ_OTP_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


def test_config_loads_defaults() -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    config = AppConfig()

    assert config.backend == "otp"
    assert config.otp_base_url == "http://localhost:8080/otp"
    assert config.num_itineraries == 6
    assert config.live_departures_enabled is False
    assert config.reconciliation_tolerance_seconds == 120
    assert config.config_file is None


def test_default_config_runs_without_tables_file() -> None:
    """Given no config file setting, when loading tables, then they are empty."""
    tables = NetworkTablesLoader.load(AppConfig())

    assert tables.line_styles == {}
    assert tables.default_products is None


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given TJ_ environment variables, when loading config, then they are used."""
    monkeypatch.setenv("TJ_BACKEND", "FPTF")
    monkeypatch.setenv("TJ_FPTF_BASE_URL", "https://v6.vbb.transport.rest/")
    monkeypatch.setenv("TJ_LIVE_DEPARTURES_ENABLED", "true")

    config = AppConfig()

    assert config.backend == "fptf"
    assert config.fptf_base_url == "https://v6.vbb.transport.rest"
    assert config.live_departures_enabled is True


def test_config_validates_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TJ_BACKEND", "hafas")

    with pytest.raises(ValueError, match="backend must be one of"):
        AppConfig()


def test_config_validates_timezone() -> None:
    with pytest.raises(ValueError, match="Unknown timezone"):
        AppConfig(timezone="Europe/Atlantis")


def test_config_rejects_negative_tolerance() -> None:
    with pytest.raises(ValueError, match="must not be negative"):
        AppConfig(reconciliation_tolerance_seconds=-1)


def test_config_raises_error_when_file_not_found() -> None:
    """Given a non-existent config file, when loading TOML, then FileNotFoundError is raised."""
    config = AppConfig(config_file="nonexistent.toml")

    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        config.load_toml_data()


def test_config_without_file_yields_empty_tables() -> None:
    config = AppConfig(config_file=None)

    assert config.load_toml_data() == {}
    assert NetworkTablesLoader.load(config).line_styles == {}


def test_config_parses_toml_file(tmp_path: Path) -> None:
    """Given a TOML file on disk, when loading tables, then its contents are used."""
    path = tmp_path / "config.toml"
    path.write_text(
        '[network]\nname = "VBB"\nknown_places = ["Berlin"]\n',
        encoding="utf-8",
    )

    tables = NetworkTablesLoader.load(AppConfig(config_file=str(path)))

    assert tables.network == "VBB"
    assert tables.split_place_name("Berlin Alexanderplatz") == ("Berlin", "Alexanderplatz")


class TestNetworkTablesLoader:
    """Tests for NetworkTablesLoader.from_toml_data."""

    def test_full_tables_are_loaded(self) -> None:
        toml_data = {
            "network": {
                "name": "MVV",
                "known_places": ["Garching", "Garching-Hochbrück"],
                "default_products": ["S", "U"],
            },
            "line_styles": {"U6": {"background": "#005f95", "foreground": "#ffffff"}},
            "station_equivalents": {"Hauptbahnhof": "Hbf"},
            "live_station_ids": {"de:09162:6": "de:09162:6"},
        }

        tables = NetworkTablesLoader.from_toml_data(toml_data)

        assert tables.network == "MVV"
        assert tables.known_places == ("Garching-Hochbrück", "Garching")
        assert tables.default_products == frozenset({Product.SUBURBAN_TRAIN, Product.SUBWAY})
        assert tables.line_style("U6") == Style("#005f95", "#ffffff")
        assert tables.canonical_station_name("HAUPTBAHNHOF") == "hbf"
        assert tables.live_station_id("de:09162:6") == "de:09162:6"

    def test_longer_known_place_wins(self) -> None:
        """Given overlapping place names, then the longest prefix splits the name."""
        tables = NetworkTablesLoader.from_toml_data(
            {"network": {"known_places": ["Garching", "Garching-Hochbrück"]}}
        )

        assert tables.split_place_name("Garching-Hochbrück Bahnhof") == (
            "Garching-Hochbrück",
            "Bahnhof",
        )

    def test_network_falls_back_to_config_value(self) -> None:
        tables = NetworkTablesLoader.from_toml_data({}, network="VBB")

        assert tables.network == "VBB"
        assert tables.default_products is None

    def test_unknown_product_code_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown product code"):
            NetworkTablesLoader.from_toml_data({"network": {"default_products": ["X"]}})

    def test_non_table_equivalents_raise(self) -> None:
        with pytest.raises(ValueError, match="station_equivalents"):
            NetworkTablesLoader.from_toml_data({"station_equivalents": ["Hbf"]})

    def test_invalid_line_style_is_skipped(self) -> None:
        tables = NetworkTablesLoader.from_toml_data({"line_styles": {"U1": "green"}})

        assert tables.line_styles == {}
