"""
Authentication business logic.
"""

import structlog
from jose import JWTError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import unauthorized
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from app.features.auth.schemas import TokenResponse
from app.models.user import User

logger = structlog.get_logger(__name__)


class AuthService:
    """Credential checks and token issuance."""

    @staticmethod
    async def get_user(db: AsyncSession, user_id: str) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        email: str,
        password: str,
    ) -> User | None:
        """
        Check an email/password pair.

        Returns:
            The user when the credentials match an active account, else None
        """
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("login_failed", email=email, reason="bad_credentials")
            return None

        if not user.is_active:
            logger.warning("login_failed", email=email, reason="inactive")
            return None

        logger.info("login_succeeded", user_id=user.id, is_msp_admin=user.is_msp_admin)
        return user

    @staticmethod
    def generate_tokens(user: User) -> TokenResponse:
        access_token = create_access_token(
            subject=user.id,
            claims={"msp_admin": user.is_msp_admin},
        )
        return TokenResponse(
            access_token=access_token,
            refresh_token=create_refresh_token(subject=user.id),
            token_type="bearer",
            expires_in=settings.access_token_expire_minutes * 60,
        )

    @staticmethod
    async def refresh_access_token(
        db: AsyncSession,
        refresh_token: str,
    ) -> TokenResponse:
        """
        Issue a new token pair from a refresh token.

        Raises:
            HTTPException: 401 when the token is invalid or the user is gone
        """
        try:
            payload = decode_token(refresh_token, expected_type="refresh")
        except JWTError:
            raise unauthorized("Invalid refresh token")

        user = await AuthService.get_user(db, payload["sub"])
        if user is None or not user.is_active:
            raise unauthorized("User not found or inactive")

        return AuthService.generate_tokens(user)


# Singleton instance
auth_service = AuthService()
