"""
Application configuration
"""
import os
from typing import Optional


class Settings:
    """Application settings"""

    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL", "")
    DATABASE_SSLMODE: Optional[str] = os.getenv("DATABASE_SSLMODE")

    # Firebase
    FIREBASE_SERVICE_ACCOUNT_JSON: Optional[str] = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")
    FIREBASE_STORAGE_BUCKET: Optional[str] = os.getenv("FIREBASE_STORAGE_BUCKET")

    # Profile fetch: retries after a not-found read, fixed delay between attempts
    PROFILE_FETCH_RETRIES: int = int(os.getenv("PROFILE_FETCH_RETRIES", "3"))
    PROFILE_FETCH_DELAY_SECONDS: float = float(os.getenv("PROFILE_FETCH_DELAY_SECONDS", "0.5"))

    RECENT_ENTRIES_LIMIT: int = int(os.getenv("RECENT_ENTRIES_LIMIT", "7"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings
    CORS_ORIGINS: list = ["*"]  # Mobile client and Expo web preview
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]


settings = Settings()
