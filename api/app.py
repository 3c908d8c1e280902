"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.auth import AuthMiddleware
from api.routers import (
    accounts_router,
    commands_router,
    common_router,
    run_router,
    schedule_router,
)
from api.services.app_initializer import AppServiceInitializer
from core import get_logger, setup_logging
from core.config import Settings, load_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(
        level=settings.log_level,
        enable_file_logging=not settings.is_testing,
        is_test_env=settings.is_testing,
    )
    logger.info(f"Starting RewardPilot API server in {settings.environment} mode")
    logger.info(f"Authentication required: {settings.auth_required}")

    # Tests may inject services before startup
    services: AppServiceInitializer | None = getattr(app.state, "services", None)
    if services is None:
        services = AppServiceInitializer(settings)
        await services.initialize_all_services(app)

    try:
        await services.start_all_services()
    except Exception as e:
        logger.error(f"Failed to start background services: {e}")

    logger.info("RewardPilot API server initialized successfully")

    yield

    try:
        await services.stop_all_services()
    except Exception as e:
        logger.error(f"Error stopping background services: {e}")

    logger.info("RewardPilot API server shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI app with the given or current settings."""
    settings = settings or load_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Control API for the RewardPilot automation",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(AuthMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(common_router)
    app.include_router(run_router)
    app.include_router(schedule_router)
    app.include_router(accounts_router)
    app.include_router(commands_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


app = create_app()
