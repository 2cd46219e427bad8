"""
Pydantic schemas for the authenticated principal.
"""

from pydantic import EmailStr, Field

from app.schemas.common import BaseSchema


class Principal(BaseSchema):
    """
    The signed-in user as seen by portal resolution.

    Built from the identity store; the portal core only reads it.
    """

    id: str
    email: EmailStr
    full_name: str | None = Field(None, max_length=255)
    is_active: bool = True
    is_msp_admin: bool = False
    default_organization_id: str | None = None
    default_team_id: str | None = None
