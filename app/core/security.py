"""
Password hashing and JWT handling.

Access tokens carry the user id in ``sub`` plus an ``msp_admin`` claim for
logging only; authorization always re-reads the user from the database.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TokenType = Literal["access", "refresh"]


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(
    subject: str,
    token_type: TokenType,
    expires_delta: timedelta,
    claims: dict[str, Any] | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    to_encode = dict(claims or {})
    to_encode.update({
        "sub": str(subject),
        "iat": now,
        "exp": now + expires_delta,
        "type": token_type,
    })
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(
    subject: str,
    claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a short-lived access token.

    Args:
        subject: User ID
        claims: Extra claims merged into the payload
        expires_delta: Lifetime (default: ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(subject, "access", expires_delta, claims)


def create_refresh_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a refresh token (default lifetime: REFRESH_TOKEN_EXPIRE_DAYS)."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.refresh_token_expire_days)
    return _encode(subject, "refresh", expires_delta)


def decode_token(token: str, expected_type: TokenType | None = None) -> dict[str, Any]:
    """
    Decode and validate a JWT.

    Raises:
        JWTError: invalid signature, expired, missing subject or wrong type
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.warning("jwt_decode_failed", error=str(e))
        raise

    if not payload.get("sub"):
        raise JWTError("Token has no subject")
    if expected_type is not None and payload.get("type") != expected_type:
        raise JWTError(f"Expected a {expected_type} token")

    return payload
