"""
Firebase Admin - ID token verification and Storage bucket access.

Primary mode:
    - Use Firebase Admin SDK with a service account (recommended for production).

Fallback mode (when FIREBASE_SERVICE_ACCOUNT_JSON is not configured):
    - Decode the JWT without verifying the signature using PyJWT.
    - This trusts the token contents and is meant for local development only.
"""
import json
import logging
from typing import Optional

import firebase_admin
import jwt  # PyJWT
from firebase_admin import auth, credentials, storage

from recovery_companion.config import settings

logger = logging.getLogger(__name__)

_firebase_initialized = False


def init_firebase() -> bool:
    """Initialize Firebase Admin SDK from the service account in settings."""
    global _firebase_initialized
    if _firebase_initialized:
        return True

    credentials_json = settings.FIREBASE_SERVICE_ACCOUNT_JSON
    if not credentials_json:
        logger.info("FIREBASE_SERVICE_ACCOUNT_JSON not set - Firebase Admin not initialized")
        return False

    try:
        cred = credentials.Certificate(json.loads(credentials_json))
        options = {}
        if settings.FIREBASE_STORAGE_BUCKET:
            options["storageBucket"] = settings.FIREBASE_STORAGE_BUCKET
        firebase_admin.initialize_app(cred, options or None)
        _firebase_initialized = True
        logger.info("Firebase Admin initialized")
        return True
    except Exception:
        logger.exception("Firebase init failed")
        return False


def get_bucket():
    """
    Default Storage bucket, or None when Firebase or the bucket is not configured.
    """
    if not settings.FIREBASE_STORAGE_BUCKET or not init_firebase():
        return None
    return storage.bucket()


def _decode_without_verification(id_token: str) -> Optional[dict]:
    """
    Fallback: decode JWT without verifying signature.

    Firebase puts the user id in "sub"; it is copied to "uid" to match what
    auth.verify_id_token returns.
    """
    try:
        decoded = jwt.decode(
            id_token,
            options={
                "verify_signature": False,
                "verify_exp": False,
                "verify_aud": False,
            },
        )
    except jwt.PyJWTError as e:
        logger.warning("Token decode without verification failed: %s", e)
        return None

    if "uid" not in decoded and decoded.get("sub"):
        decoded["uid"] = decoded["sub"]
    logger.debug("Token decoded without verification (fallback mode)")
    return decoded


def verify_id_token(id_token: str) -> Optional[dict]:
    """
    Verify Firebase ID token and return decoded claims.

    Returns:
        dict with uid, email, etc. or None if invalid.
    """
    if init_firebase():
        try:
            return auth.verify_id_token(id_token)
        except Exception as e:
            logger.warning("Token verification via Firebase Admin failed: %s", e)
            return None

    return _decode_without_verification(id_token)
