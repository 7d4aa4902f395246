"""
ASGI entry point - `uvicorn app:app`.

The application lives in recovery_companion/main.py:
- recovery_companion/gate/ - navigation gate (decision table and runtime)
- recovery_companion/routes/ - API endpoints organized by domain
- recovery_companion/services/ - profile, tracking, progress, photo and reminder logic
- recovery_companion/database/ - database connection and utilities
- recovery_companion/models/ - Pydantic models
"""
from recovery_companion.main import app

__all__ = ['app']
