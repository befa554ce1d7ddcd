"""
Event Hub API - FastAPI Application

Main entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from eventhub.api import router as api_router
from eventhub.core.config import get_settings
from eventhub.core.deadline import RequestDeadlineMiddleware
from eventhub.core.exceptions import AppError
from eventhub.db import models_registry  # noqa: F401 - Import to register models
from eventhub.db.base import Base
from eventhub.db.session import async_session_maker, engine
from eventhub.images import ImageStore
from eventhub.schemas.user import UserCreate
from eventhub.services.user_service import UserService
from eventhub.workers.orphan_images import OrphanImageSweeper

settings = get_settings()

scheduler: AsyncIOScheduler | None = None


async def init_database() -> None:
    """Initialize database tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")


async def init_default_user() -> None:
    """Create default admin user if not exists."""
    async with async_session_maker() as db:
        user_service = UserService(db)
        existing = await user_service.get_by_email(settings.admin_email)
        if not existing:
            await user_service.create_user(
                UserCreate(
                    email=settings.admin_email,
                    password=settings.admin_password,
                    is_superuser=True,
                )
            )
            logger.info(f"Default admin user {settings.admin_email} created")


def start_scheduler(store: ImageStore) -> None:
    """Start periodic jobs."""
    global scheduler

    if not settings.enable_orphan_sweeper:
        logger.info("Orphan image sweeper disabled")
        return

    scheduler = AsyncIOScheduler()
    sweeper = OrphanImageSweeper(store)
    scheduler.add_job(
        sweeper.run,
        "interval",
        minutes=settings.orphan_sweep_interval_minutes,
        id="orphan_images",
    )
    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler() -> None:
    global scheduler

    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler stopped")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Event Hub API...")

    Path(settings.data_save_folder).mkdir(parents=True, exist_ok=True)

    await init_database()
    await init_default_user()

    image_store = ImageStore.from_settings(settings)
    image_store.ensure_directories()
    app.state.image_store = image_store
    start_scheduler(image_store)

    logger.info(f"Event Hub API started on port {settings.port}")

    yield

    logger.info("Shutting down Event Hub API...")
    stop_scheduler()
    await engine.dispose()
    logger.info("Event Hub API stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Event Hub API - companies, events, activities and their images",
    lifespan=lifespan,
    docs_url="/swagger" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(RequestDeadlineMiddleware, timeout=settings.request_timeout_seconds)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors as Code/Message/Details."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"Code": exc.status_code, "Message": exc.message, "Details": exc.details},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"Code": 500, "Message": str(exc), "Details": None},
    )


app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "eventhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers,
    )
