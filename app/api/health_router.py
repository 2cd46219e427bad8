"""
Health check endpoints for monitoring and orchestration.

Provides:
- Liveness probe: Is the app running?
- Readiness probe: Can the tenant directory be read?
- Detailed health check: Status of all dependencies

Redis only holds cached resolutions, so losing it degrades the service
but never makes it unready.
"""

import time
from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.core.cache import cache_manager
from app.core.database import db_manager

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


async def _check_database() -> dict[str, Any]:
    start = time.perf_counter()
    try:
        async for db in db_manager.get_session():
            await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("health_check_failed", dependency="database", error=str(e))
        return {"status": "unhealthy", "error": str(e)}
    return {
        "status": "healthy",
        "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
    }


async def _check_redis() -> dict[str, Any]:
    if not cache_manager.enabled:
        return {"status": "disabled"}

    start = time.perf_counter()
    try:
        await cache_manager.client.ping()
    except Exception as e:
        logger.warning("health_check_failed", dependency="redis", error=str(e))
        return {"status": "unhealthy", "error": str(e)}
    return {
        "status": "healthy",
        "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
    }


@router.get("/health/live")
async def liveness() -> dict:
    """
    Liveness probe.

    Returns:
        200: Application is running
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness() -> JSONResponse:
    """
    Readiness probe.

    Returns:
        200: The tenant directory answers
        503: It does not
    """
    checks = {"database": await _check_database()}
    is_ready = checks["database"]["status"] == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        },
    )


@router.get("/health")
async def health() -> dict:
    """Dependency status with version information."""
    checks = {
        "database": await _check_database(),
        "redis": await _check_redis(),
    }
    overall_status = "healthy"
    if any(check["status"] == "unhealthy" for check in checks.values()):
        overall_status = "degraded"

    return {
        "status": overall_status,
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks,
    }
