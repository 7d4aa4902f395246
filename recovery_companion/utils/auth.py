"""
Request authentication dependencies
"""
import logging
from typing import Optional

from fastapi import Header, HTTPException

from recovery_companion.gate.rules import Session
from recovery_companion.services.firebase_auth import verify_id_token

logger = logging.getLogger(__name__)


def session_from_authorization(authorization: Optional[str]) -> Optional[Session]:
    """Verify a "Bearer <token>" header; None when missing or invalid."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[7:].strip()
    if not token:
        return None

    claims = verify_id_token(token)
    if not claims:
        return None
    uid = claims.get("uid") or ""
    if not uid:
        return None
    return Session(uid=uid, email=claims.get("email"))


async def get_current_user(authorization: Optional[str] = Header(None)) -> Session:
    """Session of the caller; 401 when the token is missing or invalid"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header")

    session = session_from_authorization(authorization)
    if session is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return session


async def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[Session]:
    """Session of the caller, or None for anonymous callers"""
    session = session_from_authorization(authorization)
    if session is None and authorization:
        logger.info("Ignoring invalid Authorization header, treating caller as anonymous")
    return session
