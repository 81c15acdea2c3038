import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from dayflow.config import settings as app_settings
from dayflow.models.activity import ActivityLog
from dayflow.models.reminder import Reminder, ReminderStatus
from dayflow.models.reminder_session import ReminderSession
from dayflow.models.user_settings import UserSettings
from dayflow.reminders.focus import classify_focus_state, count_context_switches
from dayflow.reminders.messages import MessageContext, build_reminder_message
from dayflow.reminders.policy import (
    ReminderLimits,
    ScheduleDecision,
    register_dismissal,
    schedule_next_reminder,
)
from dayflow.reminders.quiet_hours import is_quiet
from dayflow.reminders.types import FocusState, ReminderSettings, ReminderState
from dayflow.utils.timezone import resolve_timezone, today_range_utc

logger = logging.getLogger(__name__)

RECENT_SWITCH_MINUTES = 10


def default_limits() -> ReminderLimits:
    return ReminderLimits(
        min_spacing_minutes=app_settings.min_reminder_spacing_minutes,
        max_per_day=app_settings.max_reminders_per_day,
        auto_snooze_after_dismissals=app_settings.auto_snooze_after_dismissals,
        auto_snooze_duration_minutes=app_settings.auto_snooze_duration_minutes,
    )


class ReminderScheduler:
    """Gathers stored state for a device and runs the reminder engine on it."""

    def __init__(self, db: Session, limits: ReminderLimits | None = None):
        self.db = db
        self.limits = limits or default_limits()

    def get_or_create_settings(self, device_id: str) -> UserSettings:
        user_settings = self.db.query(UserSettings).filter(
            UserSettings.device_id == device_id
        ).first()

        if not user_settings:
            user_settings = UserSettings(device_id=device_id)
            self.db.add(user_settings)
            self.db.commit()
            self.db.refresh(user_settings)

        return user_settings

    def get_or_create_session(self, device_id: str) -> ReminderSession:
        session = self.db.query(ReminderSession).filter(
            ReminderSession.device_id == device_id
        ).first()

        if not session:
            session = ReminderSession(device_id=device_id)
            self.db.add(session)
            self.db.commit()
            self.db.refresh(session)

        return session

    def roll_over_day(self, session: ReminderSession, timezone_name: str, now: datetime) -> None:
        """Reset the daily reminder counter once the local day changes."""
        tz = resolve_timezone(timezone_name)
        local_day = now.replace(tzinfo=timezone.utc).astimezone(tz).date()
        if session.reminders_day != local_day:
            session.reminders_day = local_day
            session.reminders_today = 0

    def recent_activities(self, device_id: str, now: datetime) -> list[ActivityLog]:
        one_hour_ago = now - timedelta(hours=1)
        return self.db.query(ActivityLog).filter(
            ActivityLog.device_id == device_id,
            ActivityLog.started_at >= one_hour_ago,
        ).order_by(ActivityLog.started_at.desc()).all()

    def current_activity(self, device_id: str) -> ActivityLog | None:
        return self.db.query(ActivityLog).filter(
            ActivityLog.device_id == device_id,
            ActivityLog.ended_at.is_(None),
        ).order_by(ActivityLog.started_at.desc()).first()

    def build_state(
        self,
        device_id: str,
        session: ReminderSession,
        now: datetime,
        is_idle: bool = False,
        idle_minutes: float = 0,
    ) -> tuple[ReminderState, int]:
        """Recompute the ephemeral reminder state from the last hour of logs."""
        idle = is_idle or idle_minutes >= app_settings.idle_threshold_minutes
        switches = count_context_switches(self.recent_activities(device_id, now), now)

        current = self.current_activity(device_id)
        current_minutes = 0.0
        if current is not None:
            current_minutes = max(0.0, (now - current.started_at).total_seconds() / 60)

        focus_state = classify_focus_state(
            is_idle=idle,
            current_duration_minutes=current_minutes,
            context_switches=switches,
            deep_focus_minutes=app_settings.deep_focus_minutes,
        )

        state = ReminderState(
            now=now,
            last_reminder_at=session.last_reminder_at,
            is_idle=idle,
            context_switch_count_last_hour=switches,
            focus_state=focus_state,
        )
        return state, switches

    def check(
        self,
        device_id: str,
        now: datetime,
        is_idle: bool = False,
        idle_minutes: float = 0,
    ) -> tuple[ScheduleDecision, ReminderState]:
        user_settings = self.get_or_create_settings(device_id)
        session = self.get_or_create_session(device_id)
        self.roll_over_day(session, user_settings.timezone, now)

        state, _ = self.build_state(device_id, session, now, is_idle, idle_minutes)
        snooze_until = session.snooze_until
        if snooze_until is not None and snooze_until <= now:
            snooze_until = None

        decision = schedule_next_reminder(
            ReminderSettings.model_validate(user_settings),
            state,
            self.limits,
            reminders_today=session.reminders_today or 0,
            snooze_until=snooze_until,
        )

        # The first reminder stays anchored to when it was first scheduled, not to each poll
        if (
            session.last_reminder_at is None
            and session.next_reminder_at is not None
            and decision.reason == "scheduled"
            and not is_quiet(
                session.next_reminder_at,
                user_settings.quiet_hours_start,
                user_settings.quiet_hours_end,
                resolve_timezone(user_settings.timezone),
            )
        ):
            anchored = max(session.next_reminder_at, now)
            decision = decision.model_copy(update={
                "next_reminder_at": anchored,
                "reason": "scheduled" if anchored > now else "catch_up",
            })

        session.next_reminder_at = decision.next_reminder_at
        self.db.commit()
        return decision, state

    def fire(
        self,
        device_id: str,
        now: datetime,
        is_idle: bool = False,
        idle_minutes: float = 0,
    ) -> tuple[Reminder | None, ScheduleDecision]:
        """Create a reminder if one is due, and return the following schedule."""
        decision, state = self.check(device_id, now, is_idle, idle_minutes)
        if decision.next_reminder_at is None or decision.next_reminder_at > now:
            return None, decision

        message = build_reminder_message(
            self._message_context(device_id, state, idle_minutes, now), now
        )
        reminder = Reminder(
            device_id=device_id,
            title=message.title,
            body=message.body,
            status=ReminderStatus.PENDING,
            focus_state=state.focus_state.value,
            scheduled_for=decision.next_reminder_at,
        )
        self.db.add(reminder)

        session = self.get_or_create_session(device_id)
        session.last_reminder_at = now
        session.reminders_today = (session.reminders_today or 0) + 1
        self.db.commit()
        self.db.refresh(reminder)
        logger.info("⏰ Reminder fired | %s | %s | focus=%s", device_id, reminder.title, state.focus_state.value)

        following, _ = self.check(device_id, now, is_idle, idle_minutes)
        return reminder, following

    def update_status(self, reminder: Reminder, status: ReminderStatus, now: datetime) -> Reminder:
        reminder.status = status

        if status == ReminderStatus.SHOWN and reminder.shown_at is None:
            reminder.shown_at = now
        elif status == ReminderStatus.DISMISSED and reminder.dismissed_at is None:
            reminder.dismissed_at = now
            session = self.get_or_create_session(reminder.device_id)
            count, snooze_until = register_dismissal(session.dismissals_count or 0, now, self.limits)
            session.dismissals_count = count
            if snooze_until is not None:
                session.snooze_until = snooze_until

        self.db.commit()
        self.db.refresh(reminder)
        return reminder

    def note_engagement(self, device_id: str) -> None:
        """Logging an activity means reminders are working; reset dismissals."""
        session = self.db.query(ReminderSession).filter(
            ReminderSession.device_id == device_id
        ).first()
        if session and session.dismissals_count:
            session.dismissals_count = 0

    def today_logs(self, device_id: str, timezone_name: str, now: datetime) -> list[ActivityLog]:
        start, end = today_range_utc(timezone_name, now)
        return self.db.query(ActivityLog).filter(
            ActivityLog.device_id == device_id,
            ActivityLog.started_at >= start,
            ActivityLog.started_at < end,
        ).order_by(ActivityLog.started_at.desc()).all()

    def _message_context(
        self,
        device_id: str,
        state: ReminderState,
        idle_minutes: float,
        now: datetime,
    ) -> MessageContext:
        user_settings = self.get_or_create_settings(device_id)
        logs = self.today_logs(device_id, user_settings.timezone, now)
        latest = logs[0] if logs else None

        recent_switch = (
            latest is not None
            and len(logs) > 1
            and now - latest.started_at <= timedelta(minutes=RECENT_SWITCH_MINUTES)
            and (latest.category or latest.activity) != (logs[1].category or logs[1].activity)
        )

        return MessageContext(
            is_idle=state.focus_state == FocusState.IDLE,
            last_log_time=latest.started_at if latest else None,
            recent_context_switch=recent_switch,
            logs_today_count=len(logs),
            idle_duration_minutes=idle_minutes,
        )
