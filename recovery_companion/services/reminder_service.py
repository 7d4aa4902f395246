"""
Reminder schedule - repeating daily check-in, medication and exercise reminders
"""
import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from recovery_companion.database.queries import execute_with_retry

logger = logging.getLogger(__name__)

DAILY = "daily"
MEDICATION = "medication"
EXERCISE = "exercise"

DAILY_TITLE = "📝 Daily Check-In Reminder"
DAILY_BODY = "Time to log your recovery progress for today!"
MEDICATION_TITLE = "💊 Medication Reminder"
EXERCISE_TITLE = "🏋️ Exercise Reminder"
EXERCISE_BODY = "Time for your recovery exercises!"


def row_to_reminder(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "kind": row["kind"],
        "title": row["title"],
        "body": row["body"],
        "hour": row["hour"],
        "minute": row["minute"],
        "repeats": row["repeats"],
    }


class ReminderService:
    """Reminders stored per user; the client schedules them locally"""

    def __init__(self, session_maker: sessionmaker):
        self._session_maker = session_maker

    async def _insert(self, session, uid: str, kind: str, title: str, body: str, hour: int, minute: int) -> str:
        result = await session.execute(
            text("""
                INSERT INTO reminders (firebase_uid, kind, title, body, hour, minute, repeats)
                VALUES (:uid, :kind, :title, :body, :hour, :minute, TRUE)
                RETURNING id
            """).bindparams(uid=uid, kind=kind, title=title, body=body, hour=hour, minute=minute)
        )
        reminder_id = str(result.first()[0])
        logger.info("%s reminder %s scheduled for %s at %02d:%02d", kind, reminder_id, uid, hour, minute)
        return reminder_id

    async def schedule_daily_reminder(self, uid: str, hour: int = 20, minute: int = 0) -> str:
        """Replace any existing daily reminder with one at hour:minute"""
        async with self._session_maker() as session:
            async with session.begin():
                await session.execute(
                    text("DELETE FROM reminders WHERE firebase_uid = :uid AND kind = :kind")
                    .bindparams(uid=uid, kind=DAILY)
                )
                return await self._insert(session, uid, DAILY, DAILY_TITLE, DAILY_BODY, hour, minute)

    async def schedule_medication_reminder(self, uid: str, medication_name: str, hour: int, minute: int) -> str:
        async with self._session_maker() as session:
            async with session.begin():
                return await self._insert(
                    session, uid, MEDICATION, MEDICATION_TITLE, f"Time to take {medication_name}", hour, minute
                )

    async def schedule_exercise_reminder(self, uid: str, hour: int, minute: int) -> str:
        async with self._session_maker() as session:
            async with session.begin():
                return await self._insert(session, uid, EXERCISE, EXERCISE_TITLE, EXERCISE_BODY, hour, minute)

    async def _delete(self, statement) -> int:
        async with self._session_maker() as session:
            async with session.begin():
                result = await session.execute(statement)
                return result.rowcount or 0

    async def cancel_daily_reminder(self, uid: str) -> int:
        return await self._delete(
            text("DELETE FROM reminders WHERE firebase_uid = :uid AND kind = :kind").bindparams(uid=uid, kind=DAILY)
        )

    async def cancel_reminder(self, uid: str, reminder_id: str) -> int:
        return await self._delete(
            text("DELETE FROM reminders WHERE firebase_uid = :uid AND id = CAST(:rid AS UUID)")
            .bindparams(uid=uid, rid=reminder_id)
        )

    async def cancel_all_reminders(self, uid: str) -> int:
        cancelled = await self._delete(
            text("DELETE FROM reminders WHERE firebase_uid = :uid").bindparams(uid=uid)
        )
        logger.info("Cancelled %d reminders for %s", cancelled, uid)
        return cancelled

    async def list_reminders(self, uid: str) -> List[Dict[str, Any]]:
        async with self._session_maker() as session:
            result = await execute_with_retry(
                session,
                text("""
                    SELECT id, kind, title, body, hour, minute, repeats
                    FROM reminders
                    WHERE firebase_uid = :uid
                    ORDER BY hour, minute, created_at
                """).bindparams(uid=uid)
            )
            rows = result.mappings().all()
        return [row_to_reminder(row) for row in rows]
