"""
Database query utilities with retry logic
"""
import asyncio
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def classify_error(error: Exception) -> str:
    """
    Classify a database error for retry purposes

    Returns:
        "pool", "connection", "timeout" or "fatal"
    """
    message = str(error).lower()
    error_type = type(error).__name__

    if "maxclientsinsessionmode" in message or "max clients reached" in message or "connection pool" in message:
        return "pool"
    if "connection" in message and any(word in message for word in ("closed", "lost", "reset")):
        return "connection"
    if error_type == "TimeoutError" or "CancelledError" in error_type or "timeout" in message:
        return "timeout"
    return "fatal"


async def execute_with_retry(
    session: AsyncSession,
    query: Any,
    max_retries: int = 3,
    initial_delay: float = 0.5
) -> Any:
    """
    Execute query, retrying transient database errors

    Pool exhaustion and dropped connections back off exponentially
    (0.5s, 1s, ...); timeouts wait twice as long. Anything else is raised
    immediately.

    Args:
        session: Database session
        query: SQLAlchemy statement
        max_retries: Maximum number of attempts
        initial_delay: Delay before the first retry

    Returns:
        Query result
    """
    for attempt in range(max_retries):
        try:
            return await session.execute(query)
        except Exception as e:
            kind = classify_error(e)
            logger.warning(
                "Database error on attempt %d/%d (%s): %s: %s",
                attempt + 1, max_retries, kind, type(e).__name__, str(e)[:200],
            )
            if kind == "fatal" or attempt == max_retries - 1:
                raise

            delay = initial_delay * (2 ** attempt)
            if kind == "timeout":
                delay *= 2
            logger.info("Retrying after %ss", delay)
            await asyncio.sleep(delay)

    raise RuntimeError("execute_with_retry called with max_retries < 1")
