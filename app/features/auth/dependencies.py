"""
Authentication dependencies for dependency injection.

Portal routes accept anonymous callers (the guard decides what they see),
so the bearer scheme never errors on its own.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.context import set_request_context
from app.core.database import get_db
from app.core.exceptions import forbidden, unauthorized
from app.core.security import decode_token
from app.features.auth.service import auth_service
from app.models.user import User
from app.schemas.user import Principal

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> User | None:
    try:
        payload = decode_token(token, expected_type="access")
    except JWTError:
        return None

    user = await auth_service.get_user(db, payload["sub"])
    if user is None:
        logger.warning("token_user_missing", user_id=payload["sub"])
    return user


def _bind_user(request: Request, user: User) -> None:
    request.state.user_id = user.id
    set_request_context(user_id=user.id)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Authenticated, active user; 401/403 otherwise."""
    if credentials is None:
        raise unauthorized("Authentication required")

    user = await _user_from_token(db, credentials.credentials)
    if user is None:
        raise unauthorized("Invalid or expired token")
    if not user.is_active:
        raise forbidden("User account is inactive")

    _bind_user(request, user)
    return user


async def get_current_principal(
    user: Annotated[User, Depends(get_current_user)],
) -> Principal:
    return Principal.model_validate(user)


async def get_optional_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Principal | None:
    """
    Principal of the caller, or None when signed out.

    A missing, invalid or expired token, or an inactive account, all count
    as signed out.
    """
    if credentials is None:
        return None

    user = await _user_from_token(db, credentials.credentials)
    if user is None or not user.is_active:
        return None

    _bind_user(request, user)
    return Principal.model_validate(user)


# Type aliases for cleaner code
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]
