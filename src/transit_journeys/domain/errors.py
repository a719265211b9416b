"""Exceptions raised by transit journeys."""


class TransitJourneysError(Exception):
    """Base exception for transit journeys."""


class ParserError(TransitJourneysError):
    """Raised when a backend response does not have the expected structure."""


class PolicyViolationError(TransitJourneysError, ValueError):
    """Raised when a caller uses the API in a way it does not allow."""


class PaginationDirectionError(PolicyViolationError):
    """Raised when earlier/later trips are requested but the context does not allow it."""


class UnresolvedLocationError(PolicyViolationError):
    """Raised when an unidentified location is passed where an identified one is required."""


class HttpStatusError(TransitJourneysError):
    """Raised when a backend answers with a non-success HTTP status."""

    def __init__(self, status: int, reason: str, url: str | None = None) -> None:
        message = f"HTTP {status} for {url}: {reason}" if url else f"HTTP {status}: {reason}"
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.url = url


class BackendUnavailableError(TransitJourneysError):
    """Raised when a backend cannot be reached or does not answer in time."""
