from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from dayflow.db import Base
from dayflow.config import settings


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String, unique=True, nullable=False, index=True)
    notifications_enabled = Column(Boolean, default=True)
    smart_reminders_enabled = Column(Boolean, default=True)
    min_interval_minutes = Column(Integer, default=settings.default_min_interval_minutes)
    max_interval_minutes = Column(Integer, default=settings.default_max_interval_minutes)
    fixed_interval_minutes = Column(Integer, default=settings.default_fixed_interval_minutes)  # When smart mode is off
    reminder_mode = Column(String, default="medium")  # low / medium / high
    quiet_hours_start = Column(String, nullable=True)  # "HH:mm"
    quiet_hours_end = Column(String, nullable=True)    # "HH:mm"
    timezone = Column(String, default="UTC")           # IANA name
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
