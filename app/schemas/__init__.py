"""
Pydantic schemas package.
"""

from app.schemas.common import (
    BaseSchema,
    ExtensibleSchema,
    MessageResponse,
    PaginatedResponse,
)
from app.schemas.organization import OrganizationCreate, OrganizationRead, OrganizationSummary
from app.schemas.portal import (
    AccessLevel,
    ModulePermission,
    PortalConfig,
    PortalDetection,
    PortalState,
    PortalType,
)
from app.schemas.tenant import (
    Branding,
    TenantAccessConfigRead,
    TenantAccessConfigUpdate,
    TenantDomainCreate,
    TenantDomainRead,
    TenantDomainUpdate,
    TenantResolution,
    TenantUIConfig,
)
from app.schemas.user import Principal

__all__ = [
    # Common
    "BaseSchema",
    "ExtensibleSchema",
    "MessageResponse",
    "PaginatedResponse",
    # Organization
    "OrganizationCreate",
    "OrganizationRead",
    "OrganizationSummary",
    # Tenant
    "Branding",
    "TenantUIConfig",
    "TenantDomainCreate",
    "TenantDomainRead",
    "TenantDomainUpdate",
    "TenantAccessConfigRead",
    "TenantAccessConfigUpdate",
    "TenantResolution",
    # Portal
    "AccessLevel",
    "ModulePermission",
    "PortalConfig",
    "PortalDetection",
    "PortalState",
    "PortalType",
    # Identity
    "Principal",
]
