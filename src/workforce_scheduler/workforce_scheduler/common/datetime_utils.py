"""Timezone helpers.

All instants inside the services are timezone-aware UTC datetimes. Anything
that depends on a calendar day (daily overtime grouping, week starts) goes
through the org timezone helpers below.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytz

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 instant (``Z`` suffix accepted) into aware UTC.

    Naive values are taken as UTC.
    """
    raw = (value or "").strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid datetime value: {value!r}")
    return ensure_utc(parsed)


def utcnow() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(pytz.UTC)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.UTC)
    return value.astimezone(pytz.UTC)


def get_timezone(timezone_str: str):
    try:
        return pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError:
        raise ValidationError(f"Unknown timezone: {timezone_str}")


def utc_to_local(value: datetime, timezone_str: str) -> datetime:
    return ensure_utc(value).astimezone(get_timezone(timezone_str))


def local_day_key(value: datetime, timezone_str: str) -> date:
    """Calendar date of ``value`` as seen in the organization's timezone."""
    return utc_to_local(value, timezone_str).date()


def local_midnight(day: date, timezone_str: str) -> datetime:
    """UTC instant of 00:00 on ``day`` in the organization's timezone."""
    tz = get_timezone(timezone_str)
    return tz.localize(datetime.combine(day, time())).astimezone(pytz.UTC)


def start_of_week_sunday(value: datetime, timezone_str: str) -> datetime:
    local_day = local_day_key(value, timezone_str)
    # Python weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (local_day.weekday() + 1) % 7
    return local_midnight(local_day - timedelta(days=days_since_sunday), timezone_str)


def add_local_days(value: datetime, days: int, timezone_str: str) -> datetime:
    """Shift a local-midnight instant by whole calendar days (DST-safe)."""
    local_day = local_day_key(value, timezone_str)
    return local_midnight(local_day + timedelta(days=days), timezone_str)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, floored and never negative."""
    return max(int((end - start).total_seconds() // 60), 0)


def as_hours(minutes: int) -> float:
    return round(minutes / 60, 2)
