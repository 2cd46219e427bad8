"""
Authentication endpoints.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import unauthorized
from app.features.auth.dependencies import CurrentPrincipal
from app.features.auth.schemas import LoginRequest, RefreshTokenRequest, TokenResponse
from app.features.auth.service import auth_service
from app.schemas.common import MessageResponse
from app.schemas.user import Principal

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    OAuth2 compatible token login.

    The form's ``username`` is the email address.
    """
    user = await auth_service.authenticate_user(
        db,
        email=form_data.username,
        password=form_data.password,
    )
    if user is None:
        raise unauthorized("Incorrect email or password")

    return auth_service.generate_tokens(user)


@router.post("/login/json", response_model=TokenResponse)
async def login_json(
    login_data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """Login with a JSON body."""
    user = await auth_service.authenticate_user(
        db,
        email=login_data.email,
        password=login_data.password,
    )
    if user is None:
        raise unauthorized("Incorrect email or password")

    return auth_service.generate_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    return await auth_service.refresh_access_token(db, refresh_data.refresh_token)


@router.get("/me", response_model=Principal)
async def get_me(principal: CurrentPrincipal) -> Principal:
    """The signed-in principal, including the MSP admin flag."""
    return principal


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: CurrentPrincipal) -> MessageResponse:
    """
    Logout endpoint.

    Tokens are dropped client-side; the portal re-evaluates as signed out on
    the next refresh.
    """
    logger.info("logout", user_id=principal.id)
    return MessageResponse(message="Successfully logged out")
