"""Rate limiter for outgoing backend requests.

All transports talking to the same backend share one limiter, so a paging
loop or a departures query followed by a live lookup never bursts a public
API. The limiter only spaces requests; it never retries.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Enforces a minimum delay between requests to one backend."""

    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}
    _registry_lock: ClassVar[asyncio.Lock | None] = None

    def __init__(self, api_name: str, min_delay_seconds: float = 1.0) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Backend the limiter guards (used as registry key and in logs).
            min_delay_seconds: Minimum delay between requests in seconds.
        """
        self.api_name = api_name
        self.min_delay_seconds = min_delay_seconds
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    async def get_instance(cls, api_name: str, min_delay_seconds: float = 1.0) -> ApiRateLimiter:
        """Get the shared limiter for a backend, creating it on first use.

        The delay of the first caller wins; later callers reuse that limiter.
        """
        if cls._registry_lock is None:
            cls._registry_lock = asyncio.Lock()

        async with cls._registry_lock:
            limiter = cls._instances.get(api_name)
            if limiter is None:
                limiter = cls(api_name, min_delay_seconds)
                cls._instances[api_name] = limiter
                logger.info(
                    f"Created rate limiter for {api_name} with {min_delay_seconds}s minimum delay"
                )
            return limiter

    @classmethod
    def reset(cls) -> None:
        """Forget all shared limiters."""
        cls._instances.clear()
        cls._registry_lock = None

    async def acquire(self) -> None:
        """Wait until the next request to the backend may be sent."""
        async with self._lock:
            if self._last_request_time is not None:
                wait_time = self.min_delay_seconds - (time.monotonic() - self._last_request_time)
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    async def __aenter__(self) -> ApiRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        pass
