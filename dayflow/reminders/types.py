import enum
from datetime import datetime

from pydantic import BaseModel


class FocusState(str, enum.Enum):
    DEEP = "deep"
    SHALLOW = "shallow"
    IDLE = "idle"


class ReminderSettings(BaseModel):
    """Reminder configuration as read from a device's settings row."""
    notifications_enabled: bool = True
    smart_reminders_enabled: bool = True
    min_interval_minutes: int = 20
    max_interval_minutes: int = 45
    quiet_hours_start: str | None = None  # "HH:mm"
    quiet_hours_end: str | None = None    # "HH:mm"
    fixed_interval_minutes: int | None = 30
    timezone: str = "UTC"

    class Config:
        frozen = True
        from_attributes = True

    def interval_bounds(self) -> tuple[int, int]:
        """Return (min, max) with inverted or non-positive values repaired."""
        low = max(1, self.min_interval_minutes)
        high = max(1, self.max_interval_minutes)
        if low > high:
            low, high = high, low
        return low, high


class ReminderState(BaseModel):
    """Per-evaluation snapshot of what the user is doing."""
    now: datetime
    last_reminder_at: datetime | None = None
    is_idle: bool = False
    context_switch_count_last_hour: int = 0
    focus_state: FocusState = FocusState.SHALLOW

    class Config:
        frozen = True


class ReminderMessage(BaseModel):
    title: str
    body: str
