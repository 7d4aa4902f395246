"""
Navigation endpoint - tells the client which screen it may show
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from recovery_companion.gate.rules import Session, decide, normalize_segment, profile_completion
from recovery_companion.routes.dependencies import get_optional_profile_store
from recovery_companion.services.profile_store import ProfileStore
from recovery_companion.utils.auth import get_optional_user

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_profile(store: Optional[ProfileStore], uid: str) -> Optional[Dict[str, Any]]:
    """Profile for the gate; any failure leaves it unknown"""
    if store is None:
        logger.warning("Database not configured, profile for %s unknown", uid)
        return None
    try:
        return await store.fetch_profile(uid)
    except Exception as e:
        logger.warning("Profile fetch failed for %s: %s: %s", uid, type(e).__name__, e)
        return None


@router.get("/navigation/resolve")
async def resolve_navigation(
    segment: str = Query("", description="Current route or its first path segment"),
    user: Optional[Session] = Depends(get_optional_user),
    store: Optional[ProfileStore] = Depends(get_optional_profile_store),
):
    """
    Route intent for the caller.

    Anonymous callers (no or invalid token) are routed to login. A profile
    that cannot be read yields the wait state, never an error.
    """
    profile = await load_profile(store, user.uid) if user is not None else None
    intent = decide(user, profile, segment)

    return {
        "status": "ok",
        "segment": normalize_segment(segment),
        "redirect": intent.redirect,
        "destination": intent.destination.value if intent.destination else None,
        "reason": intent.reason,
        "profileComplete": profile_completion(profile),
    }
