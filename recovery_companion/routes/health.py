"""
Health check endpoints
"""
from fastapi import APIRouter

from recovery_companion.config import settings
from recovery_companion.database.connection import is_initialized

router = APIRouter()


@router.get("/healthz")
async def healthcheck():
    """Health check endpoint"""
    return {
        "status": "ok",
        "database": "ok" if is_initialized() else "not_configured",
        "storage": "configured" if settings.FIREBASE_STORAGE_BUCKET else "not_configured",
    }
