"""
Main FastAPI application
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recovery_companion.config import settings
from recovery_companion.database.connection import init_database
from recovery_companion.logging_config import configure_logging
from recovery_companion.routes import daily, health, navigation, photos, progress, reminders, users

configure_logging()

# Create FastAPI app
app = FastAPI(
    title="Recovery Companion API",
    description="Backend API for post-surgical recovery tracking",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

# Initialize database
init_database()

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(users.router, tags=["Users"])
app.include_router(navigation.router, tags=["Navigation"])
app.include_router(daily.router, tags=["Daily"])
app.include_router(progress.router, tags=["Progress"])
app.include_router(photos.router, tags=["Photos"])
app.include_router(reminders.router, tags=["Reminders"])
