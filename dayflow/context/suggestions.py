"""Smart activity suggestions.

Pools suggestions from the detected context, time-of-day habits, recently
repeated activities and the previous task, then keeps the best five.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from dayflow.context.detector import detect_context

MIN_CONTEXT_CONFIDENCE = 60
MAX_SUGGESTIONS = 5


class HistoryEntry(BaseModel):
    activity: str
    category: str | None = None
    started_at: datetime
    ended_at: datetime | None = None

    class Config:
        from_attributes = True


class SmartSuggestion(BaseModel):
    activity: str
    category: str | None = None
    confidence: int
    reason: str
    source: Literal["context", "history", "time", "pattern"]


def _time_of_day_suggestions(current_hour: int, history: list[HistoryEntry]) -> list[SmartSuggestion]:
    hourly: dict[int, Counter] = defaultdict(Counter)
    for entry in history:
        hourly[entry.started_at.hour][entry.activity] += 1

    suggestions = []
    for offset in (-1, 0, 1):
        hour = (current_hour + offset) % 24
        if hour not in hourly:
            continue
        for activity, count in hourly[hour].most_common(2):
            if count < 2:
                continue
            confidence = min(60 + count * 5, 85) - abs(offset) * 10
            suggestions.append(SmartSuggestion(
                activity=activity,
                confidence=confidence,
                reason=f"You usually {activity} around {hour}:00",
                source="time",
            ))
    return suggestions


def _pattern_suggestions(history: list[HistoryEntry]) -> list[SmartSuggestion]:
    counts = Counter(entry.activity for entry in history[:10])
    return [
        SmartSuggestion(
            activity=activity,
            confidence=min(50 + count * 5, 75),
            reason=f"You've done this {count} times recently",
            source="pattern",
        )
        for activity, count in counts.most_common(3)
        if count >= 2
    ]


def _deduplicate(suggestions: list[SmartSuggestion]) -> list[SmartSuggestion]:
    best: dict[str, SmartSuggestion] = {}
    for suggestion in suggestions:
        key = suggestion.activity.lower()
        if key not in best or suggestion.confidence > best[key].confidence:
            best[key] = suggestion
    return list(best.values())


def get_quick_context_suggestion(active_tab: str, is_idle: bool) -> SmartSuggestion | None:
    context = detect_context(active_tab, is_idle)
    if not context.likely_task or context.confidence < MIN_CONTEXT_CONFIDENCE:
        return None
    return SmartSuggestion(
        activity=context.likely_task,
        category=context.category,
        confidence=context.confidence,
        reason=context.reason,
        source="context",
    )


def get_smart_suggestions(
    active_tab: str,
    is_idle: bool,
    history: list[HistoryEntry],
    current_hour: int,
    previous_activity: str | None = None,
) -> list[SmartSuggestion]:
    """History must be ordered most recent first."""
    suggestions: list[SmartSuggestion] = []

    quick = get_quick_context_suggestion(active_tab, is_idle)
    if quick:
        suggestions.append(quick)

    suggestions.extend(_time_of_day_suggestions(current_hour, history))
    suggestions.extend(_pattern_suggestions(history))

    if previous_activity:
        suggestions.append(SmartSuggestion(
            activity=previous_activity,
            confidence=70,
            reason="Resuming previous task",
            source="history",
        ))

    unique = _deduplicate(suggestions)
    unique.sort(key=lambda s: s.confidence, reverse=True)
    return unique[:MAX_SUGGESTIONS]
