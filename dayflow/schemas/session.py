from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field


class ReminderSessionResponse(BaseModel):
    device_id: str
    last_reminder_at: datetime | None
    next_reminder_at: datetime | None
    reminders_today: int
    reminders_day: date | None
    dismissals_count: int
    snooze_until: datetime | None
    notification_permission: str
    updated_at: datetime

    class Config:
        from_attributes = True


class ReminderSessionUpdate(BaseModel):
    notification_permission: Literal["default", "granted", "denied"] | None = None
    snooze_minutes: int | None = Field(default=None, ge=0, le=24 * 60)  # Snooze from now; 0 cancels
