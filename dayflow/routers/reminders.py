from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from dayflow.context.suggestions import get_quick_context_suggestion
from dayflow.db import get_db
from dayflow.dependencies import get_now
from dayflow.models.reminder import Reminder, ReminderStatus
from dayflow.schemas.reminder import (
    FireReminderResponse,
    NextReminderResponse,
    PendingRemindersResponse,
    ReminderCheckRequest,
    ReminderResponse,
    ReminderStatusUpdate,
)
from dayflow.services.reminder_scheduler import ReminderScheduler

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post("/{device_id}/next", response_model=NextReminderResponse)
async def get_next_reminder(
    device_id: str,
    request: ReminderCheckRequest | None = None,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Compute when the next reminder should fire.
    next_reminder_at is null while notifications are off or quiet hours are active;
    poll again later.
    """
    request = request or ReminderCheckRequest()
    scheduler = ReminderScheduler(db)
    decision, state = scheduler.check(device_id, now, request.is_idle, request.idle_minutes)

    return NextReminderResponse(
        next_reminder_at=decision.next_reminder_at,
        interval_minutes=decision.interval_minutes,
        focus_state=state.focus_state,
        context_switch_count=state.context_switch_count_last_hour,
        reason=decision.reason,
    )


@router.post("/{device_id}/fire", response_model=FireReminderResponse)
async def fire_reminder(
    device_id: str,
    request: ReminderCheckRequest | None = None,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Create a reminder if one is due. Called on the client's timer tick."""
    request = request or ReminderCheckRequest()
    scheduler = ReminderScheduler(db)
    reminder, decision = scheduler.fire(device_id, now, request.is_idle, request.idle_minutes)

    if reminder is None:
        return FireReminderResponse(
            status="skipped",
            next_reminder_at=decision.next_reminder_at,
            reason=decision.reason,
        )

    suggestion = None
    if request.active_tab:
        suggestion = get_quick_context_suggestion(request.active_tab, request.is_idle)

    return FireReminderResponse(
        status="fired",
        reminder=ReminderResponse.model_validate(reminder),
        suggestion=suggestion,
        next_reminder_at=decision.next_reminder_at,
        reason=decision.reason,
    )


@router.get("/{device_id}/pending", response_model=PendingRemindersResponse)
async def get_pending_reminders(
    device_id: str,
    db: Session = Depends(get_db)
):
    """Get pending reminders for a device, oldest first."""
    reminders = (
        db.query(Reminder)
        .filter(
            Reminder.device_id == device_id,
            Reminder.status == ReminderStatus.PENDING
        )
        .order_by(Reminder.created_at.asc())
        .all()
    )

    return PendingRemindersResponse(
        reminders=[ReminderResponse.model_validate(r) for r in reminders],
        count=len(reminders)
    )


@router.patch("/{reminder_id}/status", response_model=ReminderResponse)
async def update_reminder_status(
    reminder_id: int,
    status_update: ReminderStatusUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Update the status of a reminder.
    Sets shown_at or dismissed_at; repeated dismissals start an automatic snooze.
    """
    reminder = db.query(Reminder).filter(Reminder.id == reminder_id).first()

    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")

    return ReminderScheduler(db).update_status(reminder, status_update.status, now)
