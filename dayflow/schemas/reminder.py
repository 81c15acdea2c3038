from datetime import datetime
from pydantic import BaseModel, Field
from dayflow.context.suggestions import SmartSuggestion
from dayflow.models.reminder import ReminderStatus
from dayflow.reminders.types import FocusState


class ReminderResponse(BaseModel):
    """Response model for a fired reminder"""
    id: int
    device_id: str
    title: str
    body: str
    status: ReminderStatus
    focus_state: FocusState | None = None
    scheduled_for: datetime | None = None
    created_at: datetime
    shown_at: datetime | None = None
    dismissed_at: datetime | None = None

    class Config:
        from_attributes = True


class ReminderStatusUpdate(BaseModel):
    """Request model for updating reminder status"""
    status: ReminderStatus


class PendingRemindersResponse(BaseModel):
    reminders: list[ReminderResponse]
    count: int


class ReminderCheckRequest(BaseModel):
    """Idle signals the client observes locally"""
    is_idle: bool = False
    idle_minutes: float = Field(default=0, ge=0)
    active_tab: str | None = None


class NextReminderResponse(BaseModel):
    next_reminder_at: datetime | None
    interval_minutes: int | None
    focus_state: FocusState
    context_switch_count: int
    reason: str


class FireReminderResponse(BaseModel):
    status: str  # "fired" or "skipped"
    reminder: ReminderResponse | None = None
    suggestion: SmartSuggestion | None = None  # Likely task from the active tab
    next_reminder_at: datetime | None = None
    reason: str
