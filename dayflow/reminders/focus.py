from datetime import datetime, timedelta
from typing import Iterable, Protocol

from dayflow.reminders.types import FocusState


class ActivityEntry(Protocol):
    activity: str
    category: str | None
    started_at: datetime


def _label(entry: ActivityEntry) -> str:
    return (entry.category or entry.activity or "").strip().lower()


def count_context_switches(entries: Iterable[ActivityEntry], now: datetime) -> int:
    """Count changes of activity between consecutive entries in the last hour."""
    one_hour_ago = now - timedelta(hours=1)
    recent = sorted(
        (e for e in entries if one_hour_ago <= e.started_at <= now),
        key=lambda e: e.started_at,
    )

    switches = 0
    previous = None
    for entry in recent:
        label = _label(entry)
        if previous is not None and label != previous:
            switches += 1
        previous = label
    return switches


def classify_focus_state(
    is_idle: bool,
    current_duration_minutes: float,
    context_switches: int,
    deep_focus_minutes: int = 25,
) -> FocusState:
    if is_idle:
        return FocusState.IDLE
    if current_duration_minutes >= deep_focus_minutes and context_switches <= 2:
        return FocusState.DEEP
    return FocusState.SHALLOW
