"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the services, registers routers, and logs the effective
allocation configuration at startup.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from backend.controllers.schedule_controller import router as schedule_router
from backend.repository.request_source import RequestSourceRepository
from backend.services.allocation_service import StudyRoomAllocationService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Services are attached to app.state so every dependency is traceable
    from this function.
    """
    settings = settings or get_settings()

    repository = RequestSourceRepository(settings)
    allocation_service = StudyRoomAllocationService(
        repository=repository,
        settings=settings,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Validate configuration before accepting requests."""
        _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(schedule_router)

    app.state.repository = repository
    app.state.allocation_service = allocation_service

    return app


def _startup(app: FastAPI) -> None:
    """Fail fast on a bad allocation configuration."""
    allocation_service: StudyRoomAllocationService = app.state.allocation_service

    config = allocation_service.build_config()
    logger.info(
        "Startup: allocation configured | rooms=%s | days=%s | bucket_capacity=%s | validate_intervals=%s",
        config.room_count,
        ",".join(config.day_names),
        config.bucket_capacity,
        config.validate_intervals,
    )
    logger.info("Startup complete, system ready")


# Module-level app object for uvicorn
app = create_app()
