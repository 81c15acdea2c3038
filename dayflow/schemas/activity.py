from datetime import datetime
from pydantic import BaseModel


class ActivityStartRequest(BaseModel):
    """Start logging a new activity. Any open entry is closed first."""
    activity: str
    category: str | None = None
    window_title: str | None = None
    started_at: datetime | None = None   # Defaults to now


class ActivityEndRequest(BaseModel):
    ended_at: datetime | None = None     # Defaults to now


class ActivityLogResponse(BaseModel):
    """Response model for a stored activity log"""
    id: int
    device_id: str
    activity: str
    category: str | None
    window_title: str | None
    started_at: datetime
    ended_at: datetime | None
    duration_seconds: float | None
    is_idle: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ActivitySummaryResponse(BaseModel):
    """Lightweight summary of today's logs for the reminder client"""
    last_log_time: datetime | None
    logs_today_count: int
    last_activity: str | None
    last_category: str | None
    has_logs_today: bool
