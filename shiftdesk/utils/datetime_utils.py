"""
Timezone-aware datetime helpers.
- Store instants in UTC.
- The business day and wall clock come from settings.TZ.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from shiftdesk.core.config import settings
from shiftdesk.utils.time_formatter import parse_hhmm

UTC = timezone.utc


def business_tz() -> ZoneInfo:
    return ZoneInfo(settings.TZ)


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware)."""
    return datetime.now(UTC)


def now_local() -> datetime:
    """Current wall-clock time in the business timezone."""
    return datetime.now(business_tz())


def today_local() -> date:
    """Business day for "today"."""
    return now_local().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_business_day(value: Union[date, datetime]) -> date:
    """
    Truncate an instant to its calendar day.

    Aware datetimes are first converted to the business timezone so that two
    clock times on the same local day always land on the same date; naive
    datetimes are taken as already local.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(business_tz())
        return value.date()
    return value


def local_minutes(at: Optional[str] = None) -> int:
    """Minute of day for an "HH:MM" override, or for the business wall clock now."""
    if at is not None:
        return parse_hhmm(at)
    now = now_local()
    return now.hour * 60 + now.minute
