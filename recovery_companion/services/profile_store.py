"""
Profile store - user profile reads and writes
"""
import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from recovery_companion.config import settings
from recovery_companion.database.queries import execute_with_retry

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = """
    firebase_uid, email, display_name, photo_url, profile_complete,
    surgery_type, surgery_date, expected_recovery_weeks, doctor_info,
    insurance_provider, created_at, last_login, onboarding_completed_at, updated_at
"""


class ProfileNotFoundError(Exception):
    """Raised when updating a profile that does not exist"""

    def __init__(self, uid: str):
        super().__init__(f"No profile for user {uid}")
        self.uid = uid


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def row_to_profile(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a users row to the profile document the mobile client reads"""
    doctor_info = row["doctor_info"]
    if isinstance(doctor_info, str):
        doctor_info = json.loads(doctor_info)
    return {
        "uid": row["firebase_uid"],
        "email": row["email"],
        "displayName": row["display_name"] or "",
        "photoURL": row["photo_url"] or "",
        "profileComplete": bool(row["profile_complete"]),
        "surgeryType": row["surgery_type"],
        "surgeryDate": row["surgery_date"],
        "expectedRecoveryWeeks": row["expected_recovery_weeks"],
        "doctorInfo": doctor_info,
        "insuranceProvider": row["insurance_provider"],
        "createdAt": _iso(row["created_at"]),
        "lastLogin": _iso(row["last_login"]),
        "onboardingCompletedAt": _iso(row["onboarding_completed_at"]),
        "updatedAt": _iso(row["updated_at"]),
    }


class ProfileStore:
    """Profile operations on the users table"""

    def __init__(
        self,
        session_maker: sessionmaker,
        retries: Optional[int] = None,
        delay: Optional[float] = None,
    ):
        self._session_maker = session_maker
        self.retries = settings.PROFILE_FETCH_RETRIES if retries is None else retries
        self.delay = settings.PROFILE_FETCH_DELAY_SECONDS if delay is None else delay

    async def _read_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        async with self._session_maker() as session:
            result = await execute_with_retry(
                session,
                text(f"SELECT {PROFILE_COLUMNS} FROM users WHERE firebase_uid = :uid").bindparams(uid=uid)
            )
            row = result.mappings().first()
        return row_to_profile(row) if row else None

    async def fetch_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a profile, retrying while it has not been written yet

        A just-created account may not be readable on the first attempt, so a
        missing row is retried up to `retries` more times with a fixed delay.
        Database errors are raised to the caller.

        Args:
            uid: Firebase user id

        Returns:
            Profile dict or None if still missing after the retries
        """
        attempts_left = self.retries
        while True:
            profile = await self._read_profile(uid)
            if profile is not None:
                logger.info("Profile fetched for %s: profileComplete=%s", uid, profile["profileComplete"])
                return profile
            if attempts_left <= 0:
                logger.info("No profile found for %s after retries", uid)
                return None
            logger.info("Profile for %s not found, retrying (%d left)", uid, attempts_left)
            attempts_left -= 1
            await asyncio.sleep(self.delay)

    async def create_user_document(
        self,
        uid: str,
        email: Optional[str],
        display_name: Optional[str] = None,
        photo_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create the profile on first login, or bump last_login on later logins

        Returns:
            {"isNewUser": bool, "userData": profile}
        """
        async with self._session_maker() as session:
            async with session.begin():
                result = await session.execute(
                    text(f"""
                        INSERT INTO users (firebase_uid, email, display_name, photo_url, profile_complete)
                        VALUES (:uid, :email, :display_name, :photo_url, FALSE)
                        ON CONFLICT (firebase_uid) DO UPDATE SET last_login = NOW()
                        RETURNING {PROFILE_COLUMNS}, (xmax = 0) AS inserted
                    """).bindparams(
                        uid=uid,
                        email=email,
                        display_name=display_name or "",
                        photo_url=photo_url or "",
                    )
                )
                row = result.mappings().first()

        is_new = bool(row["inserted"])
        logger.info("User document %s for %s", "created" if is_new else "login updated", uid)
        return {"isNewUser": is_new, "userData": row_to_profile(row)}

    async def save_onboarding_data(self, uid: str, data: Mapping[str, Any]) -> None:
        """Merge onboarding answers into the profile and mark it complete"""
        async with self._session_maker() as session:
            async with session.begin():
                await session.execute(
                    text("""
                        INSERT INTO users (
                            firebase_uid, surgery_type, surgery_date, expected_recovery_weeks,
                            doctor_info, insurance_provider, profile_complete, onboarding_completed_at
                        ) VALUES (
                            :uid, :surgery_type, :surgery_date, :expected_recovery_weeks,
                            CAST(:doctor_info AS JSONB), :insurance_provider, TRUE, NOW()
                        )
                        ON CONFLICT (firebase_uid) DO UPDATE SET
                            surgery_type = EXCLUDED.surgery_type,
                            surgery_date = EXCLUDED.surgery_date,
                            expected_recovery_weeks = EXCLUDED.expected_recovery_weeks,
                            doctor_info = EXCLUDED.doctor_info,
                            insurance_provider = EXCLUDED.insurance_provider,
                            profile_complete = TRUE,
                            onboarding_completed_at = NOW()
                    """).bindparams(
                        uid=uid,
                        surgery_type=data.get("surgeryType"),
                        surgery_date=data.get("surgeryDate"),
                        expected_recovery_weeks=data.get("expectedRecoveryWeeks"),
                        doctor_info=json.dumps(data.get("doctorInfo") or {}),
                        insurance_provider=data.get("insuranceProvider") or "",
                    )
                )
        logger.info("Onboarding data saved for %s, profileComplete set to true", uid)

    async def update_profile_complete(self, uid: str, is_complete: bool) -> None:
        async with self._session_maker() as session:
            async with session.begin():
                await session.execute(
                    text("""
                        INSERT INTO users (firebase_uid, profile_complete)
                        VALUES (:uid, :complete)
                        ON CONFLICT (firebase_uid) DO UPDATE SET profile_complete = EXCLUDED.profile_complete
                    """).bindparams(uid=uid, complete=is_complete)
                )
        logger.info("Profile completion for %s set to %s", uid, is_complete)

    async def _update_existing(self, uid: str, statement) -> None:
        async with self._session_maker() as session:
            async with session.begin():
                result = await session.execute(statement)
                if result.first() is None:
                    raise ProfileNotFoundError(uid)

    async def update_surgery_info(
        self,
        uid: str,
        surgery_type: str,
        surgery_date: str,
        expected_recovery_weeks: int,
    ) -> None:
        await self._update_existing(
            uid,
            text("""
                UPDATE users SET
                    surgery_type = :surgery_type,
                    surgery_date = :surgery_date,
                    expected_recovery_weeks = :weeks,
                    updated_at = NOW()
                WHERE firebase_uid = :uid
                RETURNING firebase_uid
            """).bindparams(
                uid=uid,
                surgery_type=surgery_type,
                surgery_date=surgery_date,
                weeks=expected_recovery_weeks,
            ),
        )
        logger.info("Surgery info updated for %s", uid)

    async def update_doctor_info(self, uid: str, name: str, clinic: str, phone: str) -> None:
        await self._update_existing(
            uid,
            text("""
                UPDATE users SET
                    doctor_info = CAST(:doctor_info AS JSONB),
                    updated_at = NOW()
                WHERE firebase_uid = :uid
                RETURNING firebase_uid
            """).bindparams(
                uid=uid,
                doctor_info=json.dumps({"name": name, "clinic": clinic, "phone": phone}),
            ),
        )
        logger.info("Doctor info updated for %s", uid)
