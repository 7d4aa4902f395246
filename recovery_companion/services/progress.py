"""
Recovery progress summaries built from daily entries and the profile
"""
import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

EXERCISES_PER_DAY = 4
DEFAULT_RECOVERY_WEEKS = 12


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_surgery_date(value: Optional[str]) -> Optional[date]:
    """Parse MM/DD/YYYY or ISO 8601 dates; None when missing or malformed."""
    if not value:
        return None
    value = value.strip()
    parts = value.split("/")
    if len(parts) == 3:
        try:
            month, day, year = (int(p) for p in parts)
            return date(year, month, day)
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def days_since_surgery(surgery_date: Optional[str], today: date) -> int:
    """
    Started days since the surgery date, counted from its midnight

    The day of surgery is day 1; a future date counts the whole days ahead.
    """
    parsed = parse_surgery_date(surgery_date)
    if parsed is None:
        return 0
    elapsed = (today - parsed).days
    return elapsed + 1 if elapsed >= 0 else -elapsed


def recovery_progress(days: int, expected_weeks: Optional[int] = None) -> int:
    """Percent of the expected recovery period elapsed, capped at 100"""
    total_days = (expected_weeks or DEFAULT_RECOVERY_WEEKS) * 7
    return _round_half_up(min(days / total_days * 100, 100))


def average_pain(entries: Sequence[Mapping[str, Any]]) -> float:
    if not entries:
        return 0.0
    total = sum(entry.get("painLevel") or 0 for entry in entries)
    return round(total / len(entries), 1)


def exercise_completion(entries: Sequence[Mapping[str, Any]], per_day: int = EXERCISES_PER_DAY) -> int:
    """Percent of the daily exercises completed across the entries"""
    if not entries:
        return 0
    completed = sum(len(entry.get("exercisesCompleted") or []) for entry in entries)
    return _round_half_up(completed / (len(entries) * per_day) * 100)


def medication_days(entries: Sequence[Mapping[str, Any]]) -> int:
    return sum(1 for entry in entries if (entry.get("medications") or "").strip())


def pain_series(entries: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Chart points, oldest first

    Entries come newest first from the tracking service.
    """
    points = []
    for entry in reversed(list(entries)):
        entry_date = date.fromisoformat(entry["date"])
        points.append({
            "label": f"{entry_date.month}/{entry_date.day}",
            "value": entry.get("painLevel") or 0,
        })
    return points


def build_summary(
    profile: Optional[Mapping[str, Any]],
    entries: Sequence[Mapping[str, Any]],
    today: date,
) -> Dict[str, Any]:
    profile = profile or {}
    days = days_since_surgery(profile.get("surgeryDate"), today)
    return {
        "entryCount": len(entries),
        "averagePain": average_pain(entries),
        "exerciseCompletion": exercise_completion(entries),
        "medicationDays": medication_days(entries),
        "painSeries": pain_series(entries),
        "daysSinceSurgery": days,
        "recoveryProgress": recovery_progress(days, profile.get("expectedRecoveryWeeks")),
    }
