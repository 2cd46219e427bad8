"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.cache import cache_manager
from app.core.database import db_manager
from app.core.error_tracking import error_tracker
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    PortalError,
    ResolutionFailure,
)
from app.core.logging_config import get_logger, setup_logging
from app.core.metrics import app_info
from app.core.middleware import RequestContextMiddleware
from app.core.performance import track_http_metrics

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    db_manager.init()
    await cache_manager.init()

    app_info.info({
        "version": settings.app_version,
        "environment": settings.environment,
    })

    logger.info("application_ready")

    yield

    logger.info("application_shutting_down")
    await db_manager.close()
    await cache_manager.close()
    logger.info("application_shutdown_complete")


def _portal_error_status(exc: PortalError) -> int:
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ResolutionFailure):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_application() -> FastAPI:
    """Application factory."""

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Hostname-based tenant resolution and portal access control for an MSP platform",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Middleware (order matters - last added = outermost)

    @app.middleware("http")
    async def performance_middleware(request: Request, call_next):
        return await track_http_metrics(request, call_next)

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=exc.errors(),
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_errors(exc)},
        )

    @app.exception_handler(PortalError)
    async def portal_exception_handler(
        request: Request,
        exc: PortalError,
    ) -> JSONResponse:
        status_code = _portal_error_status(exc)
        logger.warning(
            "portal_error",
            path=request.url.path,
            error=exc.message,
            error_type=type(exc).__name__,
            status_code=status_code,
            **exc.details,
        )
        if status_code >= 500:
            error_tracker.capture_exception(exc, context={"path": request.url.path, **exc.details})

        return JSONResponse(
            status_code=status_code,
            content={
                "detail": exc.message,
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Global exception handler with error tracking."""
        request_id = getattr(request.state, "request_id", "unknown")

        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )

        error_tracker.capture_exception(
            exc,
            context={
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method,
            }
        )

        if settings.is_production:
            detail = "An internal error occurred. Please contact support."
        else:
            detail = str(exc)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": detail,
                "request_id": request_id,
            },
        )

    # Register routers
    from app.api.health_router import router as health_router
    from app.api.metrics_router import router as metrics_router
    from app.api.v1.router import v1_router

    app.include_router(health_router)

    if settings.metrics_enabled:
        app.include_router(metrics_router)

    app.include_router(v1_router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.environment,
            "portal": "/api/v1/portal",
            "health": "/health",
            "metrics": "/metrics" if settings.metrics_enabled else "Disabled",
        }

    logger.info("application_configured")
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw exception objects pydantic attaches in ``ctx``."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload and settings.is_development,
        log_level=settings.log_level.lower(),
        access_log=False,
    )
