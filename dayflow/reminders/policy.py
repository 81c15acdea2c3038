"""Anti-annoyance limits layered on top of the reminder engine.

The engine only knows about cadence and quiet hours. This module adds the
per-session limits: minimum spacing, a daily cap, manual or automatic snoozes,
and the dismissal counter that triggers the automatic snooze.
"""

import logging
from datetime import datetime, timedelta

from pydantic import BaseModel

from dayflow.reminders.engine import next_fire_time
from dayflow.reminders.interval import compute_interval_minutes
from dayflow.reminders.quiet_hours import is_quiet, next_instant_after_quiet_hours
from dayflow.reminders.types import ReminderSettings, ReminderState
from dayflow.utils.timezone import resolve_timezone, today_end_utc

logger = logging.getLogger(__name__)


class ReminderLimits(BaseModel):
    min_spacing_minutes: int = 10
    max_per_day: int = 20
    auto_snooze_after_dismissals: int = 3
    auto_snooze_duration_minutes: int = 60


class ScheduleDecision(BaseModel):
    next_reminder_at: datetime | None
    interval_minutes: int | None = None
    reason: str


def schedule_next_reminder(
    settings: ReminderSettings,
    state: ReminderState,
    limits: ReminderLimits,
    reminders_today: int = 0,
    snooze_until: datetime | None = None,
) -> ScheduleDecision:
    """Run the engine, then push its answer back past any active limit.

    Datetimes are naive UTC, as stored.
    """
    now = state.now

    if not settings.notifications_enabled:
        return ScheduleDecision(next_reminder_at=None, reason="disabled")

    next_at = next_fire_time(settings, state)
    if next_at is None:
        return ScheduleDecision(next_reminder_at=None, reason="quiet_hours")

    interval = compute_interval_minutes(settings, state)
    reason = "catch_up" if next_at == now else "scheduled"

    if snooze_until is not None and snooze_until > next_at:
        next_at, reason = snooze_until, "snoozed"

    if state.last_reminder_at is not None:
        earliest = state.last_reminder_at + timedelta(minutes=limits.min_spacing_minutes)
        if earliest > next_at:
            next_at, reason = earliest, "spacing"

    if reminders_today >= limits.max_per_day:
        tomorrow = today_end_utc(settings.timezone, now)
        if tomorrow > next_at:
            next_at, reason = tomorrow, "daily_limit"

    if reason in ("snoozed", "spacing", "daily_limit"):
        tz = resolve_timezone(settings.timezone)
        if is_quiet(next_at, settings.quiet_hours_start, settings.quiet_hours_end, tz):
            next_at = next_instant_after_quiet_hours(
                next_at, settings.quiet_hours_start, settings.quiet_hours_end, tz
            )

    logger.debug("Next reminder %s (%s, interval=%s)", next_at, reason, interval)
    return ScheduleDecision(next_reminder_at=next_at, interval_minutes=interval, reason=reason)


def register_dismissal(
    dismissals_count: int,
    now: datetime,
    limits: ReminderLimits,
) -> tuple[int, datetime | None]:
    """Return the new dismissal count and, if triggered, an auto-snooze end."""
    count = dismissals_count + 1
    if count >= limits.auto_snooze_after_dismissals:
        snooze_until = now + timedelta(minutes=limits.auto_snooze_duration_minutes)
        logger.info("Auto-snoozing reminders until %s after %d dismissals", snooze_until, count)
        return 0, snooze_until
    return count, None
