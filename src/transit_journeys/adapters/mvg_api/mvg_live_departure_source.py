"""MVG real-time departure source."""

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiohttp
from mvg import MvgApi, TransportType

from transit_journeys.adapters.modes.mode_taxonomy import ModeTable, ModeTaxonomyMapper
from transit_journeys.adapters.time_parsing import from_epoch_millis, from_epoch_seconds
from transit_journeys.domain.models.departure import Departure
from transit_journeys.domain.models.line import Line
from transit_journeys.domain.models.location import Location, LocationType
from transit_journeys.domain.models.network_tables import NetworkTables
from transit_journeys.domain.models.product import Product

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

MVG_DEPARTURES_URL = "https://www.mvg.de/api/bgw-pt/v3/departures"

MVG_MODE_TABLE = ModeTable(
    encodings={
        Product.HIGH_SPEED_TRAIN: ("BAHN",),
        Product.REGIONAL_TRAIN: ("BAHN",),
        Product.SUBURBAN_TRAIN: ("SBAHN",),
        Product.SUBWAY: ("UBAHN",),
        Product.TRAM: ("TRAM",),
        Product.BUS: ("BUS", "REGIONAL_BUS"),
        Product.FERRY: ("SCHIFF",),
    },
    fallbacks={"BAHN": Product.REGIONAL_TRAIN},
    case_sensitive=False,
)


def _transport_type_name(transport_type: TransportType) -> str:
    value = transport_type.value
    return value[0] if isinstance(value, tuple) else str(value)


# The mvg library reports display names ("U-Bahn"), the raw API enum names ("UBAHN")
LIBRARY_TYPE_TOKENS = {_transport_type_name(t): t.name for t in TransportType}


class MvgLiveDepartureSource:
    """Predicted departures from the MVG departures API.

    The raw bgw-pt/v3 endpoint is used when a session is available, the mvg
    library otherwise (or when the raw request fails).
    """

    def __init__(
        self,
        session: "ClientSession | None" = None,
        tables: NetworkTables | None = None,
        mode_table: ModeTable = MVG_MODE_TABLE,
    ) -> None:
        self._session = session
        self._tables = tables or NetworkTables()
        self._mapper = ModeTaxonomyMapper(mode_table)

    async def _fetch_raw(
        self, station_id: str, limit: int, offset_minutes: int
    ) -> list[Any] | None:
        if not self._session:
            return None
        params = {
            "globalId": station_id,
            "limit": str(limit),
            "offsetInMinutes": str(offset_minutes),
            "transportTypes": ",".join(self._mapper.tokens(Product.all())),
        }
        headers = {"accept": "application/json", "user-agent": "Mozilla/5.0"}
        try:
            async with self._session.get(
                MVG_DEPARTURES_URL, params=params, headers=headers
            ) as response:
                if response.status == 200:
                    results = await response.json()
                    return results if isinstance(results, list) else None
                logger.debug(f"MVG API returned status {response.status} for {station_id}")
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.debug(f"MVG API request failed for {station_id}, using mvg library: {e}")
        return None

    async def get_departures(
        self,
        station_id: str,
        limit: int = 10,
        time: datetime | None = None,
    ) -> list[Departure]:
        """Get predicted departures for a station (MVG global id)."""
        offset_minutes = 0
        if time is not None:
            offset_minutes = max(0, int((time - datetime.now(UTC)).total_seconds() // 60))

        results = await self._fetch_raw(station_id, limit, offset_minutes)
        if results is None:
            results = await MvgApi.departures_async(
                station_id, limit=limit, offset=offset_minutes, session=self._session
            )

        departures = []
        for result in results:
            departure = self._parse_departure(result)
            if departure is not None:
                departures.append(departure)
        return departures

    def _parse_departure(self, result: dict[str, Any]) -> Departure | None:
        # Raw API: realtimeDepartureTime (ms), label, transportType
        # mvg library: time (s), line, type (display name)
        if "realtimeDepartureTime" in result:
            predicted = from_epoch_millis(result.get("realtimeDepartureTime"))
            planned = from_epoch_millis(result.get("plannedDepartureTime"))
            label = result.get("label")
            token = result.get("transportType")
        else:
            predicted = from_epoch_seconds(result.get("time"))
            planned = from_epoch_seconds(result.get("planned"))
            label = result.get("line")
            token = LIBRARY_TYPE_TOKENS.get(result.get("type", ""), result.get("type"))

        destination = result.get("destination")
        if result.get("cancelled"):
            logger.debug(f"Dropping cancelled live departure {label} to {destination}")
            return None
        if predicted is None and planned is None:
            logger.debug(f"Dropping live departure {label} without time")
            return None

        platform = result.get("platform")
        return Departure(
            planned_time=planned,
            predicted_time=predicted,
            line=Line(
                id=None,
                network=self._tables.network,
                product=self._mapper.decode(token),
                label=label,
                style=self._tables.line_style(label),
            ),
            position=str(platform) if platform is not None else None,
            destination=(
                Location(type=LocationType.ANY, name=destination) if destination else None
            ),
        )
