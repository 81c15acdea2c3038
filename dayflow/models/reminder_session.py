from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Date
from dayflow.db import Base


class ReminderSession(Base):
    """Client reminder state, hydrated at session start and cleared on logout."""
    __tablename__ = "reminder_sessions"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String, unique=True, nullable=False, index=True)
    last_reminder_at = Column(DateTime, nullable=True)
    next_reminder_at = Column(DateTime, nullable=True)     # Last computed schedule
    reminders_today = Column(Integer, default=0)
    reminders_day = Column(Date, nullable=True)        # Local day reminders_today counts
    dismissals_count = Column(Integer, default=0)      # Consecutive dismissals
    snooze_until = Column(DateTime, nullable=True)
    notification_permission = Column(String, default="default")  # default / granted / denied
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
