import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from dayflow.db import get_db
from dayflow.dependencies import get_now
from dayflow.models.reminder_session import ReminderSession
from dayflow.schemas.session import ReminderSessionResponse, ReminderSessionUpdate
from dayflow.services.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["session"])


@router.get("/{device_id}", response_model=ReminderSessionResponse)
async def hydrate_session(
    device_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Load the client's reminder state at session start."""
    scheduler = ReminderScheduler(db)
    user_settings = scheduler.get_or_create_settings(device_id)
    session = scheduler.get_or_create_session(device_id)
    scheduler.roll_over_day(session, user_settings.timezone, now)
    db.commit()
    db.refresh(session)
    return session


@router.patch("/{device_id}", response_model=ReminderSessionResponse)
async def update_session(
    device_id: str,
    updates: ReminderSessionUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """Persist client-side changes such as permission or a manual snooze."""
    session = ReminderScheduler(db).get_or_create_session(device_id)

    if updates.notification_permission is not None:
        session.notification_permission = updates.notification_permission

    if updates.snooze_minutes is not None:
        if updates.snooze_minutes == 0:
            session.snooze_until = None
        else:
            session.snooze_until = now + timedelta(minutes=updates.snooze_minutes)

    session.updated_at = now
    db.commit()
    db.refresh(session)
    return session


@router.delete("/{device_id}")
async def clear_session(
    device_id: str,
    db: Session = Depends(get_db)
):
    """Drop the stored reminder state, e.g. on logout."""
    deleted = (
        db.query(ReminderSession)
        .filter(ReminderSession.device_id == device_id)
        .delete()
    )
    db.commit()
    logger.info("Cleared reminder session | %s", device_id)
    return {"status": "cleared" if deleted else "not_found"}
