"""
Daily check-in entries
"""
import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from recovery_companion.database.queries import execute_with_retry

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = """
    id, firebase_uid, entry_date, pain_level, medications, exercises_completed,
    sleep_quality, mood, notes, photos, created_at
"""


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def row_to_entry(row: Mapping[str, Any]) -> Dict[str, Any]:
    photos = row["photos"]
    if isinstance(photos, str):
        photos = json.loads(photos)
    return {
        "id": str(row["id"]),
        "userId": row["firebase_uid"],
        "date": row["entry_date"].isoformat(),
        "painLevel": row["pain_level"],
        "medications": row["medications"] or "",
        "exercisesCompleted": list(row["exercises_completed"] or []),
        "sleepQuality": row["sleep_quality"],
        "mood": row["mood"],
        "notes": row["notes"] or "",
        "photos": photos or [],
        "createdAt": row["created_at"].isoformat() if row["created_at"] else None,
    }


class TrackingService:
    """Reads and writes of daily_entries"""

    def __init__(self, session_maker: sessionmaker):
        self._session_maker = session_maker

    async def save_daily_entry(self, uid: str, entry: Mapping[str, Any]) -> str:
        """
        Store a check-in

        Args:
            uid: Firebase user id
            entry: painLevel, medications, exercisesCompleted, sleepQuality,
                mood, notes, photos and optionally date (defaults to today, UTC)

        Returns:
            Entry id
        """
        entry_date = entry.get("date") or utc_today()
        async with self._session_maker() as session:
            async with session.begin():
                result = await session.execute(
                    text("""
                        INSERT INTO daily_entries (
                            firebase_uid, entry_date, pain_level, medications,
                            exercises_completed, sleep_quality, mood, notes, photos
                        ) VALUES (
                            :uid, :entry_date, :pain_level, :medications,
                            :exercises, :sleep_quality, :mood, :notes, CAST(:photos AS JSONB)
                        )
                        RETURNING id
                    """).bindparams(
                        uid=uid,
                        entry_date=entry_date,
                        pain_level=entry["painLevel"],
                        medications=(entry.get("medications") or "").strip(),
                        exercises=list(entry.get("exercisesCompleted") or []),
                        sleep_quality=entry["sleepQuality"],
                        mood=entry["mood"],
                        notes=(entry.get("notes") or "").strip(),
                        photos=json.dumps(list(entry.get("photos") or [])),
                    )
                )
                entry_id = str(result.first()[0])
        logger.info("Daily entry %s saved for %s", entry_id, uid)
        return entry_id

    async def get_today_entry(self, uid: str, today: Optional[date] = None) -> Optional[Dict[str, Any]]:
        async with self._session_maker() as session:
            result = await execute_with_retry(
                session,
                text(f"""
                    SELECT {ENTRY_COLUMNS} FROM daily_entries
                    WHERE firebase_uid = :uid AND entry_date = :today
                    ORDER BY created_at DESC
                    LIMIT 1
                """).bindparams(uid=uid, today=today or utc_today())
            )
            row = result.mappings().first()
        return row_to_entry(row) if row else None

    async def get_recent_entries(self, uid: str, limit: int = 7) -> List[Dict[str, Any]]:
        """Most recent entries, newest first"""
        async with self._session_maker() as session:
            result = await execute_with_retry(
                session,
                text(f"""
                    SELECT {ENTRY_COLUMNS} FROM daily_entries
                    WHERE firebase_uid = :uid
                    ORDER BY created_at DESC
                    LIMIT :limit
                """).bindparams(uid=uid, limit=limit)
            )
            rows = result.mappings().all()
        return [row_to_entry(row) for row in rows]
