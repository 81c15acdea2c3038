"""Context-aware reminder notification text."""

from datetime import datetime

from pydantic import BaseModel

from dayflow.reminders.types import ReminderMessage

IDLE_RETURN_MINUTES = 10
STALE_LOG_MINUTES = 120

REMINDER_MODE_PRESETS = {
    "low": (30, 60),
    "medium": (20, 45),
    "high": (15, 30),
}


class MessageContext(BaseModel):
    is_idle: bool = False
    last_log_time: datetime | None = None
    recent_context_switch: bool = False
    logs_today_count: int = 0
    idle_duration_minutes: float = 0


def build_reminder_message(context: MessageContext, now: datetime) -> ReminderMessage:
    minutes_since_last_log = None
    if context.last_log_time is not None:
        minutes_since_last_log = int((now - context.last_log_time).total_seconds() // 60)

    if context.is_idle and context.idle_duration_minutes > IDLE_RETURN_MINUTES:
        return ReminderMessage(
            title="Back at it?",
            body="Log what you're about to do to track your progress.",
        )

    if context.recent_context_switch:
        return ReminderMessage(
            title="New task?",
            body="Log your current activity to keep your timeline accurate.",
        )

    if minutes_since_last_log is not None and minutes_since_last_log > STALE_LOG_MINUTES:
        return ReminderMessage(
            title="Time to log?",
            body="You haven't logged anything in a while. Want to track what you're doing?",
        )

    if context.logs_today_count == 0:
        return ReminderMessage(
            title="Start tracking",
            body="Log your first activity to begin tracking your day.",
        )

    if context.is_idle:
        return ReminderMessage(
            title="Taking a break?",
            body="Log this break time to complete your activity timeline.",
        )

    return ReminderMessage(
        title="What are you doing right now?",
        body="Log your current activity to keep your timeline updated.",
    )


def reminder_mode_presets(mode: str | None) -> tuple[int, int]:
    """Return (min, max) interval minutes for a frequency mode."""
    return REMINDER_MODE_PRESETS.get(mode or "", REMINDER_MODE_PRESETS["medium"])
