"""Timezone-aware day boundaries.

Activity logs reset at midnight in each user's own timezone. These helpers
find the UTC instants of local midnights; stored timestamps are naive UTC, so
the range helpers return naive UTC datetimes as well.
"""

import logging
from datetime import datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=128)
def resolve_timezone(name: str | None):
    """Return a tzinfo for an IANA name, falling back to UTC."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unknown timezone %r, using UTC", name)
        return timezone.utc


def is_valid_timezone(name: str) -> bool:
    if name.upper() == "UTC":
        return True
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _local_midnight_utc(day, tz) -> datetime:
    midnight = datetime.combine(day, time(0, 0), tzinfo=tz)
    return midnight.astimezone(timezone.utc).replace(tzinfo=None)


def today_start_utc(tz_name: str = "UTC", now: datetime | None = None) -> datetime:
    """UTC instant of the most recent local midnight in ``tz_name``."""
    tz = resolve_timezone(tz_name)
    local_now = _as_aware_utc(now or _utcnow()).astimezone(tz)
    return _local_midnight_utc(local_now.date(), tz)


def today_end_utc(tz_name: str = "UTC", now: datetime | None = None) -> datetime:
    """UTC instant of the next local midnight.

    Computed from the calendar rather than start + 24h, so days that gain or
    lose an hour to DST come out right.
    """
    tz = resolve_timezone(tz_name)
    local_now = _as_aware_utc(now or _utcnow()).astimezone(tz)
    return _local_midnight_utc(local_now.date() + timedelta(days=1), tz)


def today_range_utc(tz_name: str = "UTC", now: datetime | None = None) -> tuple[datetime, datetime]:
    return today_start_utc(tz_name, now), today_end_utc(tz_name, now)


def yesterday_range_utc(tz_name: str = "UTC", now: datetime | None = None) -> tuple[datetime, datetime]:
    tz = resolve_timezone(tz_name)
    local_now = _as_aware_utc(now or _utcnow()).astimezone(tz)
    today = local_now.date()
    return _local_midnight_utc(today - timedelta(days=1), tz), _local_midnight_utc(today, tz)


def is_today_in_timezone(timestamp: datetime, tz_name: str = "UTC", now: datetime | None = None) -> bool:
    start, end = today_range_utc(tz_name, now)
    value = _as_aware_utc(timestamp).replace(tzinfo=None)
    return start <= value < end


def seconds_until_next_midnight(tz_name: str = "UTC", now: datetime | None = None) -> float:
    """Seconds until the local day rolls over, for dashboard refresh timers."""
    current = _as_aware_utc(now or _utcnow()).replace(tzinfo=None)
    return (today_end_utc(tz_name, now) - current).total_seconds()


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Normalize a client timestamp to the naive UTC form rows are stored in."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
