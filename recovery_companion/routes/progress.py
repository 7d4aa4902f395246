"""
Progress summary endpoint
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from recovery_companion.config import settings
from recovery_companion.gate.rules import Session
from recovery_companion.routes.dependencies import get_profile_store, get_tracking_service
from recovery_companion.services.profile_store import ProfileStore
from recovery_companion.services.progress import build_summary
from recovery_companion.services.tracking_service import TrackingService, utc_today
from recovery_companion.utils.auth import get_current_user
from recovery_companion.utils.errors import internal_error
from recovery_companion.utils.validators import validate_limit

router = APIRouter()


@router.get("/progress")
async def get_progress(
    limit: Optional[int] = Query(None, description="Number of recent entries to summarise"),
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
    tracking: TrackingService = Depends(get_tracking_service),
):
    """
    Recovery summary: average pain, exercise completion, medication days,
    pain chart points and recovery progress since surgery.
    """
    limit = validate_limit(limit, settings.RECENT_ENTRIES_LIMIT)
    try:
        profile = await store.fetch_profile(user.uid)
        entries = await tracking.get_recent_entries(user.uid, limit)
        return {"status": "ok", "summary": build_summary(profile, entries, utc_today())}
    except Exception as e:
        return internal_error("getProgress", e)
