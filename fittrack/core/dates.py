"""Date helpers. Database timestamps are UTC; some backends return them naive."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_zone(tz_name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def is_valid_timezone(tz_name: str) -> bool:
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def to_local(value: datetime, tz_name: str | None) -> datetime:
    return ensure_utc(value).astimezone(get_zone(tz_name))


def local_today(tz_name: str | None, now: datetime | None = None) -> date:
    return to_local(now or utcnow(), tz_name).date()


def start_of_week(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def combine_utc(day: date, at: time, tz_name: str | None = None) -> datetime:
    """Local date + time in the user's zone, as an aware UTC datetime."""
    return datetime.combine(day, at, tzinfo=get_zone(tz_name)).astimezone(timezone.utc)


def start_of_period(now: datetime, period: str) -> datetime:
    """Start of the calendar month or year containing `now`."""
    if period == "year":
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
