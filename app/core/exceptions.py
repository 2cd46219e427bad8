"""
Custom exception hierarchy for the application.
"""

from typing import Any

from fastapi import HTTPException, status


class PortalError(Exception):
    """Base exception for all application exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(PortalError):
    """Raised when authentication fails."""
    pass


class AuthorizationError(PortalError):
    """Raised when user lacks permissions."""
    pass


class ResolutionFailure(PortalError):
    """
    Raised when the tenant directory cannot answer a lookup.

    Covers unreachable stores, query errors and lookup timeouts.
    Hostname-driven resolution recovers from it by falling back to "no tenant".
    """
    pass


class InvalidTenantState(ResolutionFailure):
    """Raised when a tenant domain references an organization that does not exist."""
    pass


class ConfigLoadFailure(PortalError):
    """Raised when the access config of an already resolved tenant cannot be loaded."""
    pass


# HTTP Exception helpers
def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    """Return 401 Unauthorized exception."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(detail: Any = "Insufficient permissions") -> HTTPException:
    """Return 403 Forbidden exception."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=detail,
    )


def not_found(detail: str = "Resource not found") -> HTTPException:
    """Return 404 Not Found exception."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def bad_request(detail: str = "Bad request") -> HTTPException:
    """Return 400 Bad Request exception."""
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def conflict(detail: str = "Resource already exists") -> HTTPException:
    """Return 409 Conflict exception."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=detail,
    )
