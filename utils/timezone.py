"""UTC-everywhere time handling, plus studio-local calendar helpers."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def _zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {tz_name}")


def to_local(dt: datetime, tz_name: str) -> datetime:
    """
    Convert UTC datetime to the studio's timezone for display.

    Raises:
        ValueError: If datetime is naive or timezone name is invalid
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime. Datetime must be timezone-aware."
        )
    return dt.astimezone(_zone(tz_name))


def local_today(tz_name: str) -> date:
    """Calendar date at the studio right now."""
    return now_utc().astimezone(_zone(tz_name)).date()


def next_anniversary(original: date, today: date) -> date:
    """
    Next occurrence (today or later) of a yearly date such as a birthday.

    Feb 29 falls back to Feb 28 in non-leap years.
    """
    def in_year(year: int) -> date:
        try:
            return original.replace(year=year)
        except ValueError:
            return date(year, 2, 28)

    candidate = in_year(today.year)
    if candidate < today:
        candidate = in_year(today.year + 1)
    return candidate


def falls_within(original: date, today: date, days: int) -> bool:
    """Whether the yearly date recurs between today and today + days (inclusive)."""
    return next_anniversary(original, today) <= today + timedelta(days=days)
