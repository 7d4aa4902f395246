"""
Daily check-in endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from recovery_companion.config import settings
from recovery_companion.gate.rules import Session
from recovery_companion.models.schemas import DailyEntryPayload
from recovery_companion.routes.dependencies import get_tracking_service
from recovery_companion.services.tracking_service import TrackingService
from recovery_companion.utils.auth import get_current_user
from recovery_companion.utils.errors import internal_error
from recovery_companion.utils.validators import validate_limit

router = APIRouter()


@router.post("/daily")
async def send_daily(
    payload: DailyEntryPayload,
    user: Session = Depends(get_current_user),
    tracking: TrackingService = Depends(get_tracking_service),
):
    """Save daily check-in"""
    try:
        entry_id = await tracking.save_daily_entry(user.uid, {
            "date": payload.entry_date,
            "painLevel": payload.pain_level,
            "medications": payload.medications,
            "exercisesCompleted": payload.exercises_completed,
            "sleepQuality": payload.sleep_quality,
            "mood": payload.mood,
            "notes": payload.notes,
            "photos": [photo.model_dump(exclude_none=True) for photo in payload.photos],
        })
        return {"status": "ok", "id": entry_id}
    except Exception as e:
        return internal_error("sendDaily", e)


@router.get("/daily/today")
async def get_today(
    user: Session = Depends(get_current_user),
    tracking: TrackingService = Depends(get_tracking_service),
):
    try:
        entry = await tracking.get_today_entry(user.uid)
        return {"status": "ok", "entry": entry}
    except Exception as e:
        return internal_error("getToday", e)


@router.get("/daily/recent")
async def get_recent(
    limit: Optional[int] = Query(None, description="Number of entries, newest first"),
    user: Session = Depends(get_current_user),
    tracking: TrackingService = Depends(get_tracking_service),
):
    limit = validate_limit(limit, settings.RECENT_ENTRIES_LIMIT)
    try:
        entries = await tracking.get_recent_entries(user.uid, limit)
        return {"status": "ok", "entries": entries}
    except Exception as e:
        return internal_error("getRecent", e)
