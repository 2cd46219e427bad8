"""
Pydantic schemas for portal detection and configuration.

Both are derived from (tenant, principal) on every refresh and never stored.
"""

from enum import Enum
from typing import Literal

from pydantic import Field

from app.schemas.common import BaseSchema


class PortalType(str, Enum):
    """Which portal the current origin serves."""
    MSP_ADMIN = "msp_admin"
    CLIENT_PORTAL = "client_portal"
    ESN_PORTAL = "esn_portal"


class AccessLevel(str, Enum):
    """Permission on a single module."""
    NONE = "none"
    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class TenantInfo(BaseSchema):
    domain_name: str
    organization_id: str
    organization_name: str


class UserAccess(BaseSchema):
    has_admin_access: bool = False
    can_switch_organizations: bool = False
    accessible_modules: list[str] = Field(default_factory=list)


class PortalDetection(BaseSchema):
    """Portal type and module access for one (tenant, principal) pair."""

    portal_type: PortalType
    is_msp_admin_portal: bool
    is_client_portal: bool
    tenant_info: TenantInfo | None = None
    user_access: UserAccess


class PortalBranding(BaseSchema):
    company_name: str
    primary_color: str
    accent_color: str | None = None
    secondary_color: str | None = None
    logo: str | None = None
    favicon: str | None = None
    custom_css: str | None = None


class PortalUIConfig(BaseSchema):
    show_msp_branding: bool
    show_organization_selector: bool
    show_team_selector: bool
    theme: Literal["light", "dark", "auto"] = "light"
    custom_header: str | None = None
    custom_footer: str | None = None


class PortalFeatures(BaseSchema):
    multi_tenant_access: bool = False
    cross_organization_view: bool = False
    admin_settings_access: bool = False
    cloud_management: bool = False
    user_management: bool = False


class PortalConfig(BaseSchema):
    """Everything the front-end needs to render the current portal."""

    type: PortalType
    tenant_domain: str | None = None
    organization_id: str | None = None
    allowed_modules: list[str] = Field(default_factory=list)
    branding: PortalBranding
    ui_config: PortalUIConfig
    features: PortalFeatures


class ModulePermission(BaseSchema):
    """Access to one module of the published namespace."""

    module_id: str
    access_level: AccessLevel
    visible: bool


class PortalState(BaseSchema):
    """Snapshot of a portal session."""

    portal_config: PortalConfig | None = None
    portal_detection: PortalDetection | None = None
    loading: bool = False
    error: str | None = None
