"""UTC datetime utilities."""

from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This function should be used instead of datetime.now() or datetime.utcnow()
    to ensure all timestamps are timezone-aware and stored in UTC.

    Returns:
        Timezone-aware datetime in UTC

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime | date) -> datetime:
    """
    Coerce a date or datetime into a timezone-aware UTC datetime.

    Naive datetimes are assumed to already be UTC (SQLite hands stored
    timestamps back without tzinfo). Plain dates become midnight UTC.

    Args:
        value: date or datetime to normalize

    Returns:
        Timezone-aware datetime in UTC
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
