from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from dayflow.db import get_db
from dayflow.dependencies import get_now
from dayflow.models.activity import ActivityLog
from dayflow.schemas.activity import (
    ActivityEndRequest,
    ActivityLogResponse,
    ActivityStartRequest,
    ActivitySummaryResponse,
)
from dayflow.services.reminder_scheduler import ReminderScheduler
from dayflow.utils.timezone import to_naive_utc

router = APIRouter(prefix="/activities", tags=["activities"])


def _close_open_entries(db: Session, device_id: str, ended_at: datetime) -> list[ActivityLog]:
    open_entries = (
        db.query(ActivityLog)
        .filter(ActivityLog.device_id == device_id, ActivityLog.ended_at.is_(None))
        .all()
    )
    for entry in open_entries:
        entry.ended_at = max(ended_at, entry.started_at)
    return open_entries


@router.post("/{device_id}/start", response_model=ActivityLogResponse)
async def start_activity(
    device_id: str,
    request: ActivityStartRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Start a new activity, ending whatever was running."""
    activity = request.activity.strip()
    if not activity:
        raise HTTPException(status_code=422, detail="Activity is required")

    started_at = to_naive_utc(request.started_at) or now
    _close_open_entries(db, device_id, started_at)

    log = ActivityLog(
        device_id=device_id,
        activity=activity,
        category=request.category,
        window_title=request.window_title,
        started_at=started_at,
        is_idle=False,
    )
    db.add(log)
    ReminderScheduler(db).note_engagement(device_id)
    db.commit()
    db.refresh(log)

    return log


@router.post("/{device_id}/end", response_model=list[ActivityLogResponse])
async def end_activity(
    device_id: str,
    request: ActivityEndRequest | None = None,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """End the running activity."""
    ended_at = (to_naive_utc(request.ended_at) if request else None) or now
    closed = _close_open_entries(db, device_id, ended_at)
    if not closed:
        raise HTTPException(status_code=404, detail="No running activity")

    db.commit()
    for log in closed:
        db.refresh(log)
    return closed


@router.get("/{device_id}/summary", response_model=ActivitySummaryResponse)
async def get_today_summary(
    device_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Summary of today's logs in the device's own timezone."""
    scheduler = ReminderScheduler(db)
    user_settings = scheduler.get_or_create_settings(device_id)
    logs = scheduler.today_logs(device_id, user_settings.timezone, now)
    last = logs[0] if logs else None

    return ActivitySummaryResponse(
        last_log_time=last.started_at if last else None,
        logs_today_count=len(logs),
        last_activity=last.activity if last else None,
        last_category=last.category if last else None,
        has_logs_today=bool(logs),
    )


@router.get("/{device_id}", response_model=list[ActivityLogResponse])
async def list_activities(
    device_id: str,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """Get recent activity logs for a device."""
    activities = (
        db.query(ActivityLog)
        .filter(ActivityLog.device_id == device_id)
        .order_by(ActivityLog.started_at.desc())
        .limit(limit)
        .all()
    )
    return activities
