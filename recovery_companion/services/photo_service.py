"""
Recovery photos in Firebase Storage
"""
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)

DOWNLOAD_URL = "https://firebasestorage.googleapis.com/v0/b/{bucket}/o/{path}?alt=media&token={token}"


class StorageNotConfiguredError(Exception):
    """Raised when no Storage bucket is configured"""


class PhotoPathError(Exception):
    """Raised for photo paths outside the caller's folder"""


def photo_prefix(uid: str) -> str:
    return f"users/{uid}/photos/"


def download_url(bucket_name: str, path: str, token: str) -> str:
    return DOWNLOAD_URL.format(bucket=bucket_name, path=quote(path, safe=""), token=token)


class PhotoService:
    """Upload, list and delete photos under users/{uid}/photos/"""

    def __init__(self, bucket: Optional[Any]):
        self._bucket = bucket

    @property
    def bucket(self):
        if self._bucket is None:
            raise StorageNotConfiguredError("Firebase Storage bucket not configured")
        return self._bucket

    def _url_for(self, blob) -> str:
        metadata = blob.metadata or {}
        token = metadata.get("firebaseStorageDownloadTokens")
        if not token:
            # blobs uploaded outside this service have no token yet
            token = str(uuid.uuid4())
            blob.metadata = {**metadata, "firebaseStorageDownloadTokens": token}
            blob.patch()
        return download_url(self.bucket.name, blob.name, token.split(",")[0])

    def upload_photo(
        self,
        uid: str,
        content: bytes,
        entry_date: str,
        content_type: str = "image/jpeg",
    ) -> Dict[str, Any]:
        """
        Upload one photo

        Args:
            uid: Firebase user id
            content: Image bytes
            entry_date: YYYY-MM-DD of the check-in the photo belongs to

        Returns:
            {"url", "filename", "path", "uploadedAt"}
        """
        if "/" in entry_date or ".." in entry_date:
            raise PhotoPathError(f"Entry date {entry_date!r} is not a plain date")
        filename = f"{entry_date}_{int(time.time() * 1000)}.jpg"
        path = photo_prefix(uid) + filename
        token = str(uuid.uuid4())

        blob = self.bucket.blob(path)
        blob.metadata = {"firebaseStorageDownloadTokens": token}
        blob.upload_from_string(content, content_type=content_type)
        logger.info("Photo uploaded to %s", path)

        return {
            "url": download_url(self.bucket.name, path, token),
            "filename": filename,
            "path": path,
            "uploadedAt": datetime.now(timezone.utc).isoformat(),
        }

    def get_user_photos(self, uid: str) -> List[Dict[str, Any]]:
        """All photos of a user, newest filename first"""
        photos = []
        for blob in self.bucket.list_blobs(prefix=photo_prefix(uid)):
            photos.append({
                "url": self._url_for(blob),
                "filename": blob.name.rsplit("/", 1)[-1],
                "path": blob.name,
            })
        photos.sort(key=lambda photo: photo["filename"], reverse=True)
        return photos

    def delete_photo(self, uid: str, path: str) -> None:
        if not path.startswith(photo_prefix(uid)) or ".." in path:
            raise PhotoPathError(f"Photo path {path!r} does not belong to user {uid}")
        self.bucket.blob(path).delete()
        logger.info("Photo deleted: %s", path)
