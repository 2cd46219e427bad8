"""
Custom middleware for the application.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.context import clear_request_context, set_request_context
from app.core.tenant import normalize_origin

logger = structlog.get_logger(__name__)


def extract_origin(request: Request) -> str | None:
    """
    Hostname the client addressed.

    Proxies forward the original host in X-Forwarded-Host; the first entry
    wins when several proxies appended to it.
    """
    forwarded = request.headers.get("X-Forwarded-Host")
    if forwarded:
        return normalize_origin(forwarded.split(",")[0])
    return normalize_origin(request.headers.get("Host") or request.url.hostname)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add request context.

    Sets:
    - Request ID (for log correlation)
    - Trace ID (for distributed tracing)
    - Origin (input of tenant resolution)
    - Request timing
    - Context variables for structured logging
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = str(uuid.uuid4())
        trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
        origin = extract_origin(request)

        request.state.request_id = request_id
        request.state.trace_id = trace_id
        request.state.origin = origin
        request.state.tenant_id = None
        request.state.user_id = None

        set_request_context(
            request_id=request_id,
            trace_id=trace_id,
            origin=origin,
        )

        start_time = time.time()

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            duration_ms = round((time.time() - start_time) * 1000, 2)

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Trace-ID"] = trace_id
            response.headers["X-Process-Time"] = str(duration_ms)

            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
                user_id=request.state.user_id,
                tenant_id=request.state.tenant_id,
            )

            return response

        except Exception as e:
            duration_ms = round((time.time() - start_time) * 1000, 2)

            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=duration_ms,
                error=str(e),
                exc_info=True,
            )
            raise

        finally:
            clear_request_context()
