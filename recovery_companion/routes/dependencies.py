"""
Service providers for the routers
"""
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from recovery_companion.database.connection import get_session, is_initialized, require_session_maker
from recovery_companion.services.firebase_auth import get_bucket
from recovery_companion.services.photo_service import PhotoService
from recovery_companion.services.profile_store import ProfileStore
from recovery_companion.services.reminder_service import ReminderService
from recovery_companion.services.tracking_service import TrackingService


def get_profile_store(session_maker: sessionmaker = Depends(require_session_maker)) -> ProfileStore:
    return ProfileStore(session_maker)


def get_tracking_service(session_maker: sessionmaker = Depends(require_session_maker)) -> TrackingService:
    return TrackingService(session_maker)


def get_reminder_service(session_maker: sessionmaker = Depends(require_session_maker)) -> ReminderService:
    return ReminderService(session_maker)


def get_photo_service() -> PhotoService:
    return PhotoService(get_bucket())


def get_optional_profile_store() -> Optional[ProfileStore]:
    """Profile store, or None when the database is not configured"""
    session_maker = get_session()
    if not is_initialized() or session_maker is None:
        return None
    return ProfileStore(session_maker)
