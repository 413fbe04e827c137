"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values; SQLite drops tzinfo on the way back."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
