"""
Pydantic schemas for Organization.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from app.models.organization import OrganizationType
from app.schemas.common import BaseSchema


class OrganizationBase(BaseSchema):
    """Fields shared by organization payloads."""

    name: str = Field(..., min_length=1, max_length=255, description="Organization name")
    type: OrganizationType = Field(OrganizationType.CLIENT, description="msp, client or esn")


class OrganizationCreate(OrganizationBase):
    """Schema for registering an organization."""

    is_msp: bool = False

    @model_validator(mode="before")
    @classmethod
    def msp_type_implies_flag(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("type") == OrganizationType.MSP:
            return {**data, "is_msp": True}
        return data


class OrganizationSummary(BaseSchema):
    """Organization as embedded in tenant payloads."""

    id: str
    name: str
    type: OrganizationType


class OrganizationRead(OrganizationBase):
    """Schema for reading organization data."""

    id: str
    is_msp: bool
    created_at: datetime
    updated_at: datetime
