"""Quiet-hours (do-not-disturb) window checks.

Windows are given as local "HH:mm" strings. A window whose start is later than
its end spans midnight, e.g. 22:00-07:00. Anything that does not parse as a
wall-clock time disables quiet hours instead of raising.
"""

import logging
import re
from datetime import datetime, time, timedelta, timezone, tzinfo

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")


def parse_hhmm(value: str | None) -> int | None:
    """Return minutes since midnight for an "HH:mm" string, or None."""
    if not value:
        return None
    match = _HHMM.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def _window(start: str | None, end: str | None) -> tuple[int, int] | None:
    if not start or not end:
        return None
    start_minutes = parse_hhmm(start)
    end_minutes = parse_hhmm(end)
    if start_minutes is None or end_minutes is None:
        logger.warning("Ignoring malformed quiet hours %r-%r", start, end)
        return None
    return start_minutes, end_minutes


def to_local(instant: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert to the wall clock quiet hours are judged in.

    Naive instants are taken as UTC when a timezone is supplied, and as
    already-local otherwise.
    """
    if tz is None:
        return instant
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz)


def is_quiet(
    instant: datetime,
    quiet_start: str | None,
    quiet_end: str | None,
    tz: tzinfo | None = None,
) -> bool:
    window = _window(quiet_start, quiet_end)
    if window is None:
        return False
    start_minutes, end_minutes = window

    local = to_local(instant, tz)
    current = local.hour * 60 + local.minute

    if start_minutes > end_minutes:
        # Spans midnight
        return current >= start_minutes or current < end_minutes
    return start_minutes <= current < end_minutes


def next_instant_after_quiet_hours(
    instant: datetime,
    quiet_start: str | None,
    quiet_end: str | None,
    tz: tzinfo | None = None,
) -> datetime:
    """Return when the quiet window containing ``instant`` ends."""
    window = _window(quiet_start, quiet_end)
    if window is None:
        return instant
    start_minutes, end_minutes = window

    local = to_local(instant, tz)
    end_time = time(end_minutes // 60, end_minutes % 60)
    result = datetime.combine(local.date(), end_time, tzinfo=local.tzinfo)

    if start_minutes > end_minutes and result < local:
        result = datetime.combine(local.date() + timedelta(days=1), end_time, tzinfo=local.tzinfo)

    if tz is None:
        return result
    if instant.tzinfo is None:
        return result.astimezone(timezone.utc).replace(tzinfo=None)
    return result.astimezone(instant.tzinfo)
