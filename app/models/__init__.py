"""
Database models package.
"""

from app.core.database import Base
from app.models.base import BaseModel
from app.models.organization import Organization, OrganizationType
from app.models.tenant import AccessType, TenantAccessConfig, TenantDomain, TenantType
from app.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "Organization",
    "OrganizationType",
    "TenantDomain",
    "TenantAccessConfig",
    "TenantType",
    "AccessType",
    "User",
]
