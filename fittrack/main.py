"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fittrack.api.middleware import PerformanceMiddleware
from fittrack.api.v1 import api_router
from fittrack.core.config import get_settings
from fittrack.core.errors import register_exception_handlers
from fittrack.core.logging import configure_logging
from fittrack.db.base import Base
from fittrack.db.session import async_session_maker, engine
from fittrack.models import *  # noqa: F401, F403 - register all models
from fittrack.services.exercises import seed_exercise_library
from fittrack.services.integration import get_integration_manager

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: optional table creation and library seeding; shutdown: dispose the pool."""
    if settings.auto_create_tables:
        # Local SQLite runs; production uses Alembic
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with async_session_maker() as session:
            await seed_exercise_library(session)
            await session.commit()
    get_integration_manager()
    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
    yield
    await engine.dispose()


def create_application() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    register_exception_handlers(app)
    # CORS: allow localhost in dev; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"status": "ok", "message": "FitTrack API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
