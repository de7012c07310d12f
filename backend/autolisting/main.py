"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from autolisting.config import settings
from autolisting.core.database import check_db_connection, close_db
from autolisting.core.exceptions import AppException
from autolisting.core.logging import get_logger, setup_logging
from autolisting.core.redis import close_redis, init_redis
from autolisting.middleware import RequestLoggingMiddleware, UrlRedirectMiddleware

# Setup logging on module load
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Check database connection
    if await check_db_connection():
        logger.info("database_connected")
    else:
        logger.error("database_connection_failed")

    # Redis backs the task queue; without it url regeneration is not scheduled
    try:
        await init_redis()
    except Exception as e:
        logger.warning("redis_init_failed", error=str(e))

    yield

    # Shutdown
    logger.info("application_shutting_down")
    await close_redis()
    await close_db()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Vehicle listing backend with hierarchical SEO urls",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # Register middleware
    _setup_middleware(app)

    # Register exception handlers
    _setup_exception_handlers(app)

    # Register routers
    _setup_routers(app)

    return app


def _setup_middleware(app: FastAPI) -> None:
    """Configure application middleware (last added runs first)."""
    # Redirects answer before routing
    if settings.redirect_middleware_enabled:
        app.add_middleware(UrlRedirectMiddleware)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging (runs first, logs all requests)
    app.add_middleware(RequestLoggingMiddleware)


def _setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle AppException with RFC 7807 format."""
        error_detail = exc.detail
        if isinstance(error_detail, dict):
            error_detail["instance"] = str(request.url.path)

        if exc.status_code >= 500:
            logger.error("app_exception", error_code=exc.error_code, message=exc.message)

        return JSONResponse(
            status_code=exc.status_code,
            content=error_detail,
            headers={"Content-Type": "application/problem+json"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("unhandled_exception", error=str(exc), path=request.url.path)

        return JSONResponse(
            status_code=500,
            content={
                "type": "https://api.autolisting.local/errors/internal_error",
                "title": "Internal Server Error",
                "status": 500,
                "detail": "An unexpected error occurred" if settings.is_production else str(exc),
                "instance": str(request.url.path),
            },
            headers={"Content-Type": "application/problem+json"},
        )


def _setup_routers(app: FastAPI) -> None:
    """Register API routers."""
    from autolisting.modules.catalog.router import router as catalog_router
    from autolisting.modules.health.router import router as health_router
    from autolisting.modules.seo.router import router as seo_router
    from autolisting.modules.urls.router import router as urls_router

    # Health checks (no prefix)
    app.include_router(health_router, tags=["Health"])

    # API v1 routes
    app.include_router(
        catalog_router,
        prefix=settings.api_prefix,
        tags=["Catalog"],
    )
    app.include_router(
        urls_router,
        prefix=settings.api_prefix,
        tags=["SEO URLs"],
    )
    app.include_router(
        seo_router,
        prefix=settings.api_prefix,
        tags=["SEO"],
    )


# Create app instance
app = create_app()
