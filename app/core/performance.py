"""
Performance monitoring utilities.
"""

import time
from typing import Any, Callable

import structlog
from fastapi import Request

from app.config import settings
from app.core.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)

logger = structlog.get_logger(__name__)


class PerformanceMonitor:
    """
    Time an async block and log its outcome.

    Usage:
        async with PerformanceMonitor("portal_refresh", origin=host) as monitor:
            ...
        monitor.duration_ms
    """

    def __init__(self, operation_name: str, **tags: Any):
        self.operation_name = operation_name
        self.tags = tags
        self.start_time: float | None = None
        self.end_time: float | None = None

    async def __aenter__(self) -> "PerformanceMonitor":
        self.start_time = time.perf_counter()
        logger.debug("operation_started", operation=self.operation_name, **self.tags)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        duration_ms = round(self.duration_ms or 0.0, 2)

        if exc_type is None:
            logger.debug(
                "operation_completed",
                operation=self.operation_name,
                duration_ms=duration_ms,
                **self.tags,
            )
        else:
            logger.warning(
                "operation_failed",
                operation=self.operation_name,
                duration_ms=duration_ms,
                error=str(exc_val),
                **self.tags,
            )

    @property
    def duration_ms(self) -> float | None:
        """Get duration in milliseconds."""
        if self.start_time is not None and self.end_time is not None:
            return (self.end_time - self.start_time) * 1000
        return None

    @property
    def duration_seconds(self) -> float | None:
        if self.duration_ms is None:
            return None
        return self.duration_ms / 1000


async def track_http_metrics(request: Request, call_next: Callable):
    """
    Middleware to track HTTP metrics.

    Records:
    - Request count by endpoint and status
    - Request duration histogram
    - Requests in progress gauge
    - Slow request warnings
    """
    endpoint = request.url.path
    method = request.method

    http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()
    start_time = time.perf_counter()

    try:
        response = await call_next(request)

        duration = time.perf_counter() - start_time
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)
        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        if duration * 1000 > settings.slow_request_threshold_ms:
            logger.warning(
                "slow_request_detected",
                method=method,
                path=endpoint,
                duration_ms=round(duration * 1000, 2),
            )

        return response

    finally:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()
