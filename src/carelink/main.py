"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from carelink.activities.router import router as activities_router
from carelink.children.router import public_router as public_children_router
from carelink.children.router import router as children_router
from carelink.config import get_settings
from carelink.dashboard.router import router as dashboard_router
from carelink.database import close_db, init_db
from carelink.health.router import router as health_router
from carelink.middleware import setup_middleware
from carelink.orphanages.router import router as orphanage_router
from carelink.redis_client import close_redis, init_redis
from carelink.volunteers.router import directory_router as volunteer_directory_router
from carelink.volunteers.router import router as volunteer_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.redis_url:
        await init_redis(settings.redis_url)
    else:
        logger.info("redis_disabled")

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="CareLink API",
        description="Orphanage, child and volunteer management API",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(orphanage_router)
    app.include_router(children_router)
    app.include_router(public_children_router)
    app.include_router(volunteer_directory_router)
    app.include_router(volunteer_router)
    app.include_router(activities_router)
    app.include_router(dashboard_router)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.upload_url_prefix, StaticFiles(directory=upload_dir), name="uploads")

    return app


app = create_app()
