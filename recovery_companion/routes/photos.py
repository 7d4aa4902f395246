"""
Recovery photo endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from starlette.concurrency import run_in_threadpool

from recovery_companion.gate.rules import Session
from recovery_companion.routes.dependencies import get_photo_service
from recovery_companion.services.photo_service import PhotoPathError, PhotoService, StorageNotConfiguredError
from recovery_companion.services.tracking_service import utc_today
from recovery_companion.utils.auth import get_current_user
from recovery_companion.utils.errors import internal_error
from recovery_companion.utils.validators import validate_entry_date

router = APIRouter()

MAX_PHOTO_BYTES = 10 * 1024 * 1024


@router.post("/photos")
async def upload_photo(
    photo: UploadFile = File(...),
    entry_date: Optional[str] = Form(None),
    user: Session = Depends(get_current_user),
    photos: PhotoService = Depends(get_photo_service),
):
    entry_date = validate_entry_date(entry_date) if entry_date else utc_today().isoformat()
    content = await photo.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty photo")
    if len(content) > MAX_PHOTO_BYTES:
        raise HTTPException(status_code=413, detail="Photo too large")

    try:
        uploaded = await run_in_threadpool(
            photos.upload_photo,
            user.uid,
            content,
            entry_date,
            photo.content_type or "image/jpeg",
        )
        return {"status": "ok", "photo": uploaded}
    except PhotoPathError:
        raise HTTPException(status_code=400, detail="Invalid entry date, expected YYYY-MM-DD")
    except StorageNotConfiguredError:
        raise HTTPException(status_code=503, detail="Photo storage not configured")
    except Exception as e:
        return internal_error("uploadPhoto", e)


@router.get("/photos")
async def list_photos(
    user: Session = Depends(get_current_user),
    photos: PhotoService = Depends(get_photo_service),
):
    try:
        return {"status": "ok", "photos": await run_in_threadpool(photos.get_user_photos, user.uid)}
    except StorageNotConfiguredError:
        raise HTTPException(status_code=503, detail="Photo storage not configured")
    except Exception as e:
        return internal_error("listPhotos", e)


@router.delete("/photos")
async def delete_photo(
    path: str = Query(..., description="Storage path returned by upload or list"),
    user: Session = Depends(get_current_user),
    photos: PhotoService = Depends(get_photo_service),
):
    try:
        await run_in_threadpool(photos.delete_photo, user.uid, path)
        return {"status": "ok"}
    except PhotoPathError:
        raise HTTPException(status_code=403, detail="Photo does not belong to the current user")
    except StorageNotConfiguredError:
        raise HTTPException(status_code=503, detail="Photo storage not configured")
    except Exception as e:
        return internal_error("deletePhoto", e)
