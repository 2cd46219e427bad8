"""
Pydantic schemas for tenant domains, their access configs and resolutions.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from app.core.tenant import normalize_origin
from app.features.portal.modules import ALL_MODULES_WILDCARD, MODULE_NAMESPACE
from app.models.organization import OrganizationType
from app.models.tenant import AccessType, TenantType
from app.schemas.common import BaseSchema, ExtensibleSchema
from app.schemas.organization import OrganizationSummary


def clean_domain_name(value: str) -> str:
    """Store the bare lowercase hostname or label."""
    normalized = normalize_origin(value)
    if not normalized:
        raise ValueError("domain_name must be a hostname or label")
    return normalized


def _clean_full_url(value: str) -> str:
    if not value.lower().startswith(("http://", "https://")):
        raise ValueError("full_url must start with http:// or https://")
    return value.rstrip("/").lower()


class Branding(ExtensibleSchema):
    """Tenant presentation; every key is optional."""

    company_name: str | None = Field(None, max_length=255)
    logo: str | None = Field(None, description="Logo URL")
    favicon: str | None = Field(None, description="Favicon URL")
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    custom_css: str | None = Field(None, description="Stylesheet injected into the portal")


class TenantUIConfig(ExtensibleSchema):
    """Tenant UI toggles; unset keys fall back to the portal type defaults."""

    show_msp_branding: bool | None = None
    show_organization_selector: bool | None = None
    show_team_selector: bool | None = None
    theme: Literal["light", "dark", "auto"] | None = None
    custom_header: str | None = None
    custom_footer: str | None = None


class TenantAccessConfigBase(BaseSchema):
    """Fields shared by access config payloads."""

    access_type: AccessType = AccessType.FULL
    allowed_modules: list[str] = Field(default_factory=list)
    access_restrictions: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    @field_validator("allowed_modules")
    @classmethod
    def dedupe_modules(cls, v: list[str]) -> list[str]:
        """Drop blanks and duplicates, keeping first occurrence order."""
        return list(dict.fromkeys(module.strip() for module in v if module.strip()))


class TenantAccessConfigUpdate(TenantAccessConfigBase):
    """Payload for configuring the modules of a tenant domain."""

    @field_validator("allowed_modules")
    @classmethod
    def known_modules_only(cls, v: list[str]) -> list[str]:
        unknown = [m for m in v if m != ALL_MODULES_WILDCARD and m not in MODULE_NAMESPACE]
        if unknown:
            raise ValueError(f"Unknown module ids: {', '.join(unknown)}")
        return v


class TenantAccessConfigRead(TenantAccessConfigBase):
    """Access config as stored."""

    id: str
    tenant_domain_id: str
    organization_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TenantDomainBase(BaseSchema):
    """Fields shared by tenant domain payloads."""

    domain_name: str = Field(..., min_length=1, max_length=255, description="Label or hostname")
    full_url: str = Field(..., min_length=1, max_length=500, description="Fully qualified origin")
    organization_id: str = Field(..., description="Owning organization")
    tenant_type: TenantType = TenantType.CLIENT
    branding: Branding = Field(default_factory=Branding)
    ui_config: TenantUIConfig = Field(default_factory=TenantUIConfig)
    extra_metadata: dict[str, Any] = Field(default_factory=dict)


class TenantDomainCreate(TenantDomainBase):
    """Schema for registering a tenant domain."""

    @field_validator("domain_name")
    @classmethod
    def validate_domain_name(cls, v: str) -> str:
        return clean_domain_name(v)

    @field_validator("full_url")
    @classmethod
    def validate_full_url(cls, v: str) -> str:
        return _clean_full_url(v)


class TenantDomainUpdate(BaseSchema):
    """Schema for updating a tenant domain (all fields optional)."""

    domain_name: str | None = Field(None, min_length=1, max_length=255)
    full_url: str | None = Field(None, min_length=1, max_length=500)
    tenant_type: TenantType | None = None
    is_active: bool | None = None
    branding: Branding | None = None
    ui_config: TenantUIConfig | None = None
    extra_metadata: dict[str, Any] | None = None

    @field_validator("domain_name")
    @classmethod
    def validate_domain_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return clean_domain_name(v)

    @field_validator("full_url")
    @classmethod
    def validate_full_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _clean_full_url(v)


class TenantDomainRead(TenantDomainBase):
    """Schema for reading tenant domain data."""

    id: str
    is_active: bool
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    organization: OrganizationSummary | None = None
    access_config: TenantAccessConfigRead | None = None


class TenantFilters(BaseSchema):
    """Query filters for the tenant domain listing."""

    tenant_type: TenantType | None = None
    organization_id: str | None = None
    is_active: bool | None = None
    search: str | None = Field(None, max_length=255)


class TenantResolution(BaseSchema):
    """
    A tenant domain resolved for an origin, joined with its organization.

    ``access_config`` is filled in separately by the portal session, since
    it is a second directory read that may fail on its own.
    """

    tenant_id: str
    organization_id: str
    organization_name: str
    organization_type: OrganizationType
    tenant_type: TenantType
    domain_name: str
    full_url: str
    branding: Branding = Field(default_factory=Branding)
    ui_config: TenantUIConfig = Field(default_factory=TenantUIConfig)
    allowed_organizations: list[str] = Field(default_factory=list)
    access_config: TenantAccessConfigRead | None = None

    @classmethod
    def from_domain(cls, domain: TenantDomainRead) -> "TenantResolution":
        """Build a resolution from a domain whose organization is loaded."""
        if domain.organization is None:
            raise ValueError(f"Tenant domain {domain.id} has no organization")

        return cls(
            tenant_id=domain.id,
            organization_id=domain.organization_id,
            organization_name=domain.organization.name,
            organization_type=domain.organization.type,
            tenant_type=domain.tenant_type,
            domain_name=domain.domain_name,
            full_url=domain.full_url,
            branding=domain.branding,
            ui_config=domain.ui_config,
            allowed_organizations=[domain.organization_id],
        )


class DomainAvailability(BaseSchema):
    """Result of a domain availability check."""

    domain_name: str
    available: bool


class TenantPreview(BaseSchema):
    """Preview URL of a tenant domain."""

    domain_name: str
    preview_url: str
