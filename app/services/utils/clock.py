from datetime import datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC copy of ``value``; naive input is taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def business_day_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Return the [start, end) UTC bounds of the calendar day containing ``now``,
    where the calendar is the one of ``BUSINESS_TIMEZONE``.
    """
    tz = ZoneInfo(settings.BUSINESS_TIMEZONE)
    now = as_utc(now) or utcnow()
    local_day = now.astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
