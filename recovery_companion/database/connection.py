"""
Database connection management
"""
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from recovery_companion.config import settings
from recovery_companion.utils.url_builder import build_async_url

logger = logging.getLogger(__name__)

# Global database objects
engine: Optional[AsyncEngine] = None
async_session: Optional[sessionmaker] = None


def init_database(database_url: Optional[str] = None) -> bool:
    """
    Initialize the async engine and session factory

    Args:
        database_url: Overrides settings.DATABASE_URL

    Returns:
        True if initialization successful, False otherwise
    """
    global engine, async_session

    database_url = database_url or settings.DATABASE_URL
    if not database_url:
        logger.warning("DATABASE_URL not set, profile and tracking features will be unavailable")
        return False

    try:
        async_database_url = build_async_url(database_url)

        connect_args = {
            "server_settings": {"application_name": "recovery_companion"},
            "command_timeout": 30,
            "timeout": 10,
        }
        if "sslmode=require" in database_url.lower() or settings.DATABASE_SSLMODE == "require":
            connect_args["ssl"] = True

        engine = create_async_engine(
            async_database_url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_recycle=1800,
            connect_args=connect_args,
            echo=False,
        )

        async_session = sessionmaker(
            bind=engine,
            expire_on_commit=False,
            class_=AsyncSession
        )

        logger.info("Database engine initialized")
        return True

    except Exception:
        logger.exception("Failed to initialize database engine")
        return False


def get_session() -> Optional[sessionmaker]:
    """Session maker, or None if the database is not initialized"""
    return async_session


def is_initialized() -> bool:
    return engine is not None and async_session is not None


def require_session_maker() -> sessionmaker:
    """
    FastAPI dependency returning the session maker

    Raises:
        HTTPException: 503 when the database is not configured
    """
    session_maker = get_session()
    if not is_initialized() or session_maker is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return session_maker
