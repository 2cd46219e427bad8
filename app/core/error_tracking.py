"""
Error tracking and reporting through the Sentry SDK.

When Sentry is disabled (the default outside production) events are only
logged locally.
"""

from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from app.config import settings

logger = structlog.get_logger(__name__)


class ErrorTracker:
    """Thin facade over sentry_sdk with a log-only fallback mode."""

    def __init__(self, enabled: bool = False, dsn: str | None = None):
        self.enabled = bool(enabled and dsn)
        self.dsn = dsn

        if self.enabled:
            sentry_sdk.init(
                dsn=dsn,
                environment=settings.environment,
                release=settings.app_version,
                traces_sample_rate=settings.sentry_traces_sample_rate,
                integrations=[
                    FastApiIntegration(),
                    SqlalchemyIntegration(),
                    AsyncioIntegration(),
                ],
            )
            logger.info("sentry_initialized", environment=settings.environment)

    def capture_exception(
        self,
        exception: BaseException,
        context: dict[str, Any] | None = None,
    ) -> str | None:
        """
        Report an exception.

        Returns:
            Sentry event ID, or None when running log-only
        """
        if not self.enabled:
            logger.error(
                "exception_captured",
                exception=str(exception),
                exception_type=type(exception).__name__,
                context=context,
            )
            return None

        with sentry_sdk.new_scope() as scope:
            for key, value in (context or {}).items():
                scope.set_extra(key, value)
            return sentry_sdk.capture_exception(exception)

    def capture_message(
        self,
        message: str,
        level: str = "warning",
        context: dict[str, Any] | None = None,
    ) -> str | None:
        """Report a non-exception event (degraded portal state, guard anomalies)."""
        if not self.enabled:
            logger.info("message_captured", message=message, level=level, context=context)
            return None

        with sentry_sdk.new_scope() as scope:
            for key, value in (context or {}).items():
                scope.set_extra(key, value)
            return sentry_sdk.capture_message(message, level=level)


# Global error tracker instance
error_tracker = ErrorTracker(
    enabled=settings.sentry_enabled,
    dsn=settings.sentry_dsn,
)
