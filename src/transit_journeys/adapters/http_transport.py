"""aiohttp transport used by all backend adapters."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import aiohttp

from transit_journeys.adapters.api_rate_limiter import ApiRateLimiter
from transit_journeys.adapters.api_request_logger import log_api_request, log_api_response
from transit_journeys.domain.errors import BackendUnavailableError, HttpStatusError

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "transit-journeys",
}


class HttpTransport:
    """Fetches response bodies over HTTP GET.

    Requests to one host share a rate limiter. Non-200 answers raise
    HttpStatusError; nothing is retried.
    """

    def __init__(
        self,
        session: "ClientSession",
        timeout_seconds: float = 10,
        min_delay_seconds: float = 1.0,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._min_delay_seconds = min_delay_seconds
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}

    async def get_text(self, url: str, params: Mapping[str, str] | None = None) -> str:
        """GET url and return the body as text."""
        api_name = urlsplit(url).netloc or url
        rate_limiter = await ApiRateLimiter.get_instance(api_name, self._min_delay_seconds)
        await rate_limiter.acquire()

        log_api_request("GET", url, params=params, headers=self._headers)
        try:
            async with self._session.get(
                url,
                params=dict(params) if params else None,
                headers=self._headers,
                timeout=self._timeout,
            ) as response:
                body = await response.text()
                log_api_response(url, response.status, len(body))
                status = response.status
                reason = response.reason or ""
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(f"Error requesting {url}: {e}")
            raise BackendUnavailableError(f"{api_name} is unreachable: {e}") from e

        if status != 200:
            logger.warning(f"{api_name} returned status {status}: {body[:200]}")
            raise HttpStatusError(status, reason, url)
        return body


@dataclass(frozen=True)
class HttpRequest:
    """A GET request as produced by the request builders."""

    url: str
    params: dict[str, str] = field(default_factory=dict)
