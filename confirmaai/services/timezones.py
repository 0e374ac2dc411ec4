"""Timezone helpers shared by the API, the scheduler and the dashboard.

Datetimes are persisted as naive UTC. Anything shown to a clinic or a
patient is converted to the clinic's local timezone first.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from confirmaai.core.config import settings
from confirmaai.models import User


def tenant_timezone(user: User | None) -> ZoneInfo:
    """Return the clinic timezone, falling back to the application default."""

    tz_name = (user.timezone if user else None) or settings.timezone
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def ensure_utc(value: datetime) -> datetime:
    """Coerce a datetime into UTC timezone-aware form."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage(value: datetime, tz: ZoneInfo) -> datetime:
    """Convert an incoming datetime to naive UTC, reading naive input as ``tz`` local time."""

    localized = value.replace(tzinfo=tz) if value.tzinfo is None else value
    return localized.astimezone(timezone.utc).replace(tzinfo=None)


def to_local(value: datetime, tz: ZoneInfo) -> datetime:
    """Convert a stored (naive UTC) datetime to clinic local time."""

    return ensure_utc(value).astimezone(tz)


def local_day_bounds(target_date: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the naive UTC ``[start, end)`` range covering a local calendar day."""

    start = datetime.combine(target_date, time.min, tzinfo=tz)
    end = datetime.combine(target_date + timedelta(days=1), time.min, tzinfo=tz)
    return to_storage(start, tz), to_storage(end, tz)


def isoformat_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    return ensure_utc(value).isoformat()
