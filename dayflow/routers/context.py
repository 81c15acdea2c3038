from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from dayflow.context.detector import DetectedContext, detect_context
from dayflow.context.suggestions import HistoryEntry, get_smart_suggestions
from dayflow.db import get_db
from dayflow.dependencies import get_now
from dayflow.models.activity import ActivityLog
from dayflow.schemas.context import ContextDetectRequest, SuggestionsRequest, SuggestionsResponse
from dayflow.services.reminder_scheduler import ReminderScheduler
from dayflow.utils.timezone import resolve_timezone

router = APIRouter(prefix="/context", tags=["context"])

HISTORY_LIMIT = 50


def _to_local(value: datetime, tz) -> datetime:
    return value.replace(tzinfo=timezone.utc).astimezone(tz).replace(tzinfo=None)


@router.post("/detect", response_model=DetectedContext)
async def detect(request: ContextDetectRequest):
    """Guess the current activity from the active tab title."""
    return detect_context(request.active_tab, request.is_idle)


@router.post("/{device_id}/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    device_id: str,
    request: SuggestionsRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Suggest what to log next from context and the device's history."""
    user_settings = ReminderScheduler(db).get_or_create_settings(device_id)
    tz = resolve_timezone(user_settings.timezone)

    logs = (
        db.query(ActivityLog)
        .filter(ActivityLog.device_id == device_id)
        .order_by(ActivityLog.started_at.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )
    # Hour-of-day habits are judged on the local clock
    history = [
        HistoryEntry(
            activity=log.activity,
            category=log.category,
            started_at=_to_local(log.started_at, tz),
            ended_at=_to_local(log.ended_at, tz) if log.ended_at else None,
        )
        for log in logs
    ]

    results = get_smart_suggestions(
        active_tab=request.active_tab,
        is_idle=request.is_idle,
        history=history,
        current_hour=_to_local(now, tz).hour,
        previous_activity=logs[0].activity if logs else None,
    )
    return SuggestionsResponse(suggestions=results, count=len(results))
