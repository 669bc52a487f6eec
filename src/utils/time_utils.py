"""Time helpers shared by use cases and converters."""

from datetime import date, datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | date) -> datetime:
    """Return an aware UTC datetime for the given date or datetime.

    Naive datetimes are assumed to already be expressed in UTC.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_millis(value: datetime) -> int:
    """Return the epoch milliseconds of a datetime."""
    return (ensure_utc(value) - EPOCH) // timedelta(milliseconds=1)


__all__ = ["EPOCH", "utc_now", "ensure_utc", "to_millis"]
