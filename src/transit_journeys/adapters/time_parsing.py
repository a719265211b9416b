"""Normalization of wire time formats to timezone-aware UTC datetimes."""

from datetime import UTC, datetime, tzinfo

import pytz

from transit_journeys.domain.errors import ParserError


def from_epoch_millis(value: int | float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=UTC)


def from_epoch_seconds(value: int | float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=UTC)


def from_service_day(service_day: int, seconds_since_midnight: int | None) -> datetime | None:
    """Combine a service day (epoch seconds of its start) with seconds since then."""
    if seconds_since_midnight is None:
        return None
    return datetime.fromtimestamp(service_day + seconds_since_midnight, tz=UTC)


def from_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp that carries an offset.

    Raises:
        ParserError: If the value is not ISO 8601 or has no offset.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ParserError(f"Invalid timestamp {value!r}") from e
    if parsed.tzinfo is None:
        raise ParserError(f"Timestamp without offset {value!r}")
    return parsed.astimezone(UTC)


def get_timezone(name: str) -> tzinfo:
    return pytz.timezone(name)


def with_timezone(value: datetime, timezone: tzinfo) -> datetime:
    """Aware datetime; naive values are taken as wall-clock time in timezone."""
    if value.tzinfo is not None:
        return value
    return timezone.localize(value)  # type: ignore[attr-defined]


def to_local(value: datetime, timezone: tzinfo) -> datetime:
    """Wall-clock time in the backend's timezone; naive values are taken as already local."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone)
