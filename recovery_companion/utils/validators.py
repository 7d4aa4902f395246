"""
Validation utilities
"""
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import HTTPException

from recovery_companion.services.progress import parse_surgery_date

MAX_RECENT_ENTRIES = 90


def validate_surgery_date(surgery_date: str) -> str:
    """
    Validate a surgery date

    Args:
        surgery_date: ISO 8601 or MM/DD/YYYY date

    Returns:
        The date, stripped

    Raises:
        HTTPException: If the date cannot be parsed or lies in the future
    """
    parsed = parse_surgery_date(surgery_date)
    if parsed is None:
        raise HTTPException(status_code=400, detail="Invalid surgery date, expected YYYY-MM-DD or MM/DD/YYYY")
    if parsed > date.today() + timedelta(days=1):
        raise HTTPException(status_code=400, detail="Surgery date cannot be in the future")
    return surgery_date.strip()


def validate_entry_date(entry_date: str) -> str:
    """Check-in date as YYYY-MM-DD; it becomes part of Storage object names"""
    try:
        return datetime.strptime(entry_date.strip(), "%Y-%m-%d").date().isoformat()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid entry date, expected YYYY-MM-DD")


def validate_limit(limit: Optional[int], default: int) -> int:
    if limit is None:
        return default
    if limit < 1 or limit > MAX_RECENT_ENTRIES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid limit. Must be between 1 and {MAX_RECENT_ENTRIES}"
        )
    return limit
