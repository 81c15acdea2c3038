from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, Enum
import enum
from dayflow.db import Base


class ReminderStatus(str, enum.Enum):
    PENDING = "pending"
    SHOWN = "shown"
    DISMISSED = "dismissed"


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    status = Column(Enum(ReminderStatus), default=ReminderStatus.PENDING, index=True)
    focus_state = Column(String, nullable=True)
    scheduled_for = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    shown_at = Column(DateTime, nullable=True)
    dismissed_at = Column(DateTime, nullable=True)
