"""Text transport port."""

from collections.abc import Mapping
from typing import Protocol


class TextTransport(Protocol):
    """Port for fetching a raw response body from a backend."""

    async def get_text(self, url: str, params: Mapping[str, str] | None = None) -> str:
        """Issue a GET request and return the body.

        Raises HttpStatusError for non-success responses and
        BackendUnavailableError when the backend cannot be reached.
        """
        ...
