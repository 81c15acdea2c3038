"""Reminder engine.

Deterministic rules for when the next "what are you doing?" reminder fires.
Everything here is pure: callers gather settings and activity state first and
pass them in, and get back either an instant or None (no reminder).
"""

import logging
from datetime import datetime, timedelta

from dayflow.reminders.interval import compute_interval_minutes
from dayflow.reminders.quiet_hours import is_quiet, next_instant_after_quiet_hours
from dayflow.reminders.types import ReminderSettings, ReminderState
from dayflow.utils.timezone import resolve_timezone

logger = logging.getLogger(__name__)


def _defer_past_quiet_hours(candidate: datetime, settings: ReminderSettings, tz) -> datetime:
    start, end = settings.quiet_hours_start, settings.quiet_hours_end
    if is_quiet(candidate, start, end, tz):
        deferred = next_instant_after_quiet_hours(candidate, start, end, tz)
        logger.debug("Deferred reminder from %s to end of quiet hours %s", candidate, deferred)
        return deferred
    return candidate


def next_fire_time(settings: ReminderSettings, state: ReminderState) -> datetime | None:
    """Return when the next reminder should fire, or None to stay silent."""
    if not settings.notifications_enabled:
        return None

    tz = resolve_timezone(settings.timezone)
    now = state.now

    # Currently silenced; the caller polls again later
    if is_quiet(now, settings.quiet_hours_start, settings.quiet_hours_end, tz):
        return None

    interval = compute_interval_minutes(settings, state)

    if state.last_reminder_at is not None:
        candidate = state.last_reminder_at + timedelta(minutes=interval)
        if candidate <= now:
            # Catch up with a single reminder now, never a backlog
            return now
        return _defer_past_quiet_hours(candidate, settings, tz)

    min_interval, _ = settings.interval_bounds()
    candidate = now + timedelta(minutes=min_interval)
    return _defer_past_quiet_hours(candidate, settings, tz)
