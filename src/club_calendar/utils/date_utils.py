"""Date and time utilities for Club Calendar application."""

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Union

import pytz
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from .exceptions import ConfigurationError


def get_timezone(name: str) -> pytz.BaseTzInfo:
    """
    Resolve a timezone name.

    Args:
        name: IANA timezone name (e.g. "Europe/Berlin")

    Returns:
        pytz timezone

    Raises:
        ConfigurationError: If the timezone is unknown
    """
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ConfigurationError(f"Unknown timezone: {name}") from e


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Normalize raw timestamp values from snapshot records.

    Accepts datetimes, dates (midnight), ISO 8601 strings and exported
    document store timestamps ({"seconds": ..., "nanoseconds": ...}).

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        return date_parser.isoparse(value)
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            raise ValueError(f"Timestamp object without seconds: {value!r}")
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        return datetime.fromtimestamp(seconds, pytz.utc) + timedelta(
            microseconds=nanos // 1000
        )
    raise ValueError(f"Unsupported timestamp value: {value!r}")


def coerce_end_day(value: Any) -> Union[date, datetime, None]:
    """
    Normalize a raw inclusive end-day value.

    Calendar days ("2025-01-22") stay dates. Timestamps are kept whole so
    their day can be taken in the club's timezone with local_day().
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    return coerce_datetime(value)


def localize(dt: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Express a datetime in the given timezone.

    Naive datetimes are read as local wall-clock time in ``tz``.
    """
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def local_day(dt: datetime, tz: pytz.BaseTzInfo) -> date:
    """Return the local civil day of a datetime (not UTC-shifted)."""
    return localize(dt, tz).date()


def start_of_day(day: date, tz: pytz.BaseTzInfo) -> datetime:
    """Return local midnight of the given day."""
    return tz.localize(datetime.combine(day, time()))


def add_days(dt: datetime, days: int) -> datetime:
    """Shift a naive wall-clock datetime by whole days."""
    return dt + timedelta(days=days)


def add_months(dt: datetime, months: int) -> datetime:
    """
    Shift a naive wall-clock datetime by whole months.

    The day of month is clamped to the last day of the target month
    (Jan 31 + 1 month -> Feb 28/29).
    """
    return dt + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Number of whole calendar-month steps from ``start`` to ``end``'s month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def get_horizon_end(now: datetime, tz: pytz.BaseTzInfo, horizon_days: int) -> date:
    """
    Last day covered by an open-ended series.

    Args:
        now: Current instant
        tz: Local timezone
        horizon_days: Number of days to look ahead, today included

    Returns:
        Inclusive last day of the horizon
    """
    return local_day(now, tz) + timedelta(days=horizon_days - 1)


def month_bounds(month: str) -> tuple[date, date]:
    """
    Get the first and last day of a month.

    Args:
        month: Month in YYYY-MM format

    Returns:
        Tuple of (first_day, last_day)

    Raises:
        ValueError: If the month string is malformed
    """
    parsed = datetime.strptime(month, "%Y-%m")
    last = calendar.monthrange(parsed.year, parsed.month)[1]
    return date(parsed.year, parsed.month, 1), date(parsed.year, parsed.month, last)
