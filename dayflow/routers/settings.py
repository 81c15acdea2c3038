import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from dayflow.db import get_db
from dayflow.dependencies import get_now
from dayflow.reminders.messages import reminder_mode_presets
from dayflow.schemas.settings import UserSettingsUpdate, UserSettingsResponse
from dayflow.services.reminder_scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])

SCHEDULE_FIELDS = {
    "notifications_enabled", "smart_reminders_enabled", "min_interval_minutes",
    "max_interval_minutes", "fixed_interval_minutes", "quiet_hours_start",
    "quiet_hours_end", "timezone",
}


@router.get("/{device_id}", response_model=UserSettingsResponse)
async def get_settings(
    device_id: str,
    db: Session = Depends(get_db)
):
    """
    Get reminder settings for a device.
    Creates default settings if they don't exist.
    """
    return ReminderScheduler(db).get_or_create_settings(device_id)


@router.patch("/{device_id}", response_model=UserSettingsResponse)
async def update_settings(
    device_id: str,
    updates: UserSettingsUpdate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Update reminder settings for a device.
    Only updates fields that are provided in the request. A reminder_mode
    replaces min/max with that mode's preset and cannot be combined with
    explicit bounds.
    """
    scheduler = ReminderScheduler(db)
    user_settings = scheduler.get_or_create_settings(device_id)

    update_data = updates.model_dump(exclude_unset=True)

    if updates.reminder_mode is not None:
        if {"min_interval_minutes", "max_interval_minutes"} & updates.model_fields_set:
            raise HTTPException(
                status_code=422,
                detail="Send either reminder_mode or explicit interval bounds, not both"
            )
        update_data["min_interval_minutes"], update_data["max_interval_minutes"] = (
            reminder_mode_presets(updates.reminder_mode)
        )

    # Fields that must never be cleared
    for field in ("notifications_enabled", "smart_reminders_enabled", "min_interval_minutes",
                  "max_interval_minutes", "fixed_interval_minutes", "reminder_mode", "timezone"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    min_interval = update_data.get("min_interval_minutes", user_settings.min_interval_minutes)
    max_interval = update_data.get("max_interval_minutes", user_settings.max_interval_minutes)
    if min_interval > max_interval:
        raise HTTPException(
            status_code=422,
            detail="min_interval_minutes must not exceed max_interval_minutes"
        )

    for field, value in update_data.items():
        setattr(user_settings, field, value)

    user_settings.updated_at = now

    # A pending first reminder was computed under the old schedule
    if SCHEDULE_FIELDS & update_data.keys():
        session = scheduler.get_or_create_session(device_id)
        session.next_reminder_at = None

    db.commit()
    db.refresh(user_settings)
    logger.info("⚙️ Settings updated | %s | %s", device_id, ", ".join(sorted(update_data)) or "nothing")

    return user_settings
