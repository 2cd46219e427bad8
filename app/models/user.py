"""
User model backing the authenticated principal.
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class User(BaseModel):
    """User account model."""

    __tablename__ = "users"

    # Authentication
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address (unique)"
    )

    hashed_password: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Profile
    full_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="User's full name"
    )

    # Status
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Account active status"
    )

    is_msp_admin: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        comment="Cross-tenant MSP administrator"
    )

    # Defaults applied when the user signs in
    default_organization_id: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        comment="Organization selected at sign-in"
    )

    default_team_id: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        comment="Team selected at sign-in"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
