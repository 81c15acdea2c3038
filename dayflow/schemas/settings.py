from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field, field_validator, model_validator
from dayflow.reminders.quiet_hours import parse_hhmm
from dayflow.utils.timezone import is_valid_timezone


class UserSettingsUpdate(BaseModel):
    """Request model for updating reminder settings"""
    notifications_enabled: bool | None = None
    smart_reminders_enabled: bool | None = None
    min_interval_minutes: int | None = Field(default=None, ge=1, le=24 * 60)
    max_interval_minutes: int | None = Field(default=None, ge=1, le=24 * 60)
    fixed_interval_minutes: int | None = Field(default=None, ge=1, le=24 * 60)
    reminder_mode: Literal["low", "medium", "high"] | None = None  # Overrides min/max with a preset
    quiet_hours_start: str | None = None  # "HH:mm", null clears
    quiet_hours_end: str | None = None    # "HH:mm", null clears
    timezone: str | None = None

    @field_validator("quiet_hours_start", "quiet_hours_end")
    @classmethod
    def normalize_time(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        minutes = parse_hhmm(value)
        if minutes is None:
            raise ValueError("Invalid time format. Use HH:mm format.")
        return f"{minutes // 60:02d}:{minutes % 60:02d}"

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def check_interval_range(self):
        low, high = self.min_interval_minutes, self.max_interval_minutes
        if low is not None and high is not None and low > high:
            raise ValueError("min_interval_minutes must not exceed max_interval_minutes")
        return self


class UserSettingsResponse(BaseModel):
    """Response model for reminder settings"""
    id: int
    device_id: str
    notifications_enabled: bool
    smart_reminders_enabled: bool
    min_interval_minutes: int
    max_interval_minutes: int
    fixed_interval_minutes: int
    reminder_mode: str
    quiet_hours_start: str | None
    quiet_hours_end: str | None
    timezone: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
