# src/menuboard/db/time.py
"""Time utilities for stored documents."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def utcnow_iso() -> str:
    """Return the current UTC time as an ISO-8601 string for document fields."""
    return utcnow().isoformat()


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware datetime, assuming UTC when naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 document timestamp, assuming UTC when naive."""
    return as_utc(datetime.fromisoformat(value))
