"""
TaskTrack API - Main Application

REST backend for the TaskTrack single-page frontend: authentication and
per-user task management.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasktrack.config import settings
from tasktrack.database import Database
from tasktrack.auth import auth_router
from tasktrack.tasks import tasks_router
from tasktrack.errors import register_exception_handlers
from tasktrack.logging_config import configure_logging
from tasktrack.security import validate_security_config

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: refuse to run without a signing secret
    validate_security_config(settings)

    database = Database(settings.MONGODB_URI, settings.MONGODB_DATABASE)
    await database.connect()
    app.state.database = database
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)

    yield

    await database.disconnect()
    app.state.database = None


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Personal task tracking with per-user task isolation",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS configuration - allow the frontend origin(s)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

register_exception_handlers(app)

api_router = APIRouter(prefix="/api")


@api_router.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Used by container health checks and load balancers.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


api_router.include_router(auth_router)
api_router.include_router(tasks_router)
app.include_router(api_router)
