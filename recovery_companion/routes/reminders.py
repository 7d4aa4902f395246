"""
Reminder schedule endpoints
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from recovery_companion.gate.rules import Session
from recovery_companion.models.schemas import DailyReminderPayload, MedicationReminderPayload, ReminderTime
from recovery_companion.routes.dependencies import get_reminder_service
from recovery_companion.services.reminder_service import ReminderService
from recovery_companion.utils.auth import get_current_user
from recovery_companion.utils.errors import internal_error

router = APIRouter()


@router.get("/reminders")
async def list_reminders(
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    try:
        return {"status": "ok", "reminders": await reminders.list_reminders(user.uid)}
    except Exception as e:
        return internal_error("listReminders", e)


@router.post("/reminders/daily")
async def schedule_daily(
    payload: Optional[DailyReminderPayload] = None,
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    """Replace the daily check-in reminder"""
    payload = payload or DailyReminderPayload()
    try:
        reminder_id = await reminders.schedule_daily_reminder(user.uid, payload.hour, payload.minute)
        return {"status": "ok", "id": reminder_id}
    except Exception as e:
        return internal_error("scheduleDaily", e)


@router.delete("/reminders/daily")
async def cancel_daily(
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    try:
        return {"status": "ok", "cancelled": await reminders.cancel_daily_reminder(user.uid)}
    except Exception as e:
        return internal_error("cancelDaily", e)


@router.post("/reminders/medication")
async def schedule_medication(
    payload: MedicationReminderPayload,
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    try:
        reminder_id = await reminders.schedule_medication_reminder(
            user.uid, payload.medication_name.strip(), payload.hour, payload.minute
        )
        return {"status": "ok", "id": reminder_id}
    except Exception as e:
        return internal_error("scheduleMedication", e)


@router.post("/reminders/exercise")
async def schedule_exercise(
    payload: ReminderTime,
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    try:
        reminder_id = await reminders.schedule_exercise_reminder(user.uid, payload.hour, payload.minute)
        return {"status": "ok", "id": reminder_id}
    except Exception as e:
        return internal_error("scheduleExercise", e)


@router.delete("/reminders")
async def cancel_all(
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    try:
        return {"status": "ok", "cancelled": await reminders.cancel_all_reminders(user.uid)}
    except Exception as e:
        return internal_error("cancelAll", e)


@router.delete("/reminders/{reminder_id}")
async def cancel_one(
    reminder_id: UUID,
    user: Session = Depends(get_current_user),
    reminders: ReminderService = Depends(get_reminder_service),
):
    try:
        cancelled = await reminders.cancel_reminder(user.uid, str(reminder_id))
    except Exception as e:
        return internal_error("cancelReminder", e)
    if not cancelled:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return {"status": "ok", "cancelled": cancelled}
