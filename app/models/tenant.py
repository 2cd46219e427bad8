"""
Tenant domain models for hostname-based multi-tenancy.

A tenant domain is the unit of resolution: the hostname a client or ESN
portal is served from, its owning organization and its presentation.
"""

from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class TenantType(str, Enum):
    """Kind of portal a tenant domain serves."""
    CLIENT = "client"
    ESN = "esn"
    MSP = "msp"


class AccessType(str, Enum):
    """Breadth of access granted by a tenant access config."""
    FULL = "full"
    LIMITED = "limited"
    READONLY = "readonly"


class TenantDomain(BaseModel):
    """Hostname owned by exactly one organization."""

    __tablename__ = "tenant_domains"

    domain_name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Short label or hostname (e.g., 'acme' or 'acme.example.com')"
    )

    full_url: Mapped[str] = mapped_column(
        String(500),
        unique=True,
        nullable=False,
        comment="Fully qualified origin (e.g., 'https://acme.example.com')"
    )

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning organization"
    )

    tenant_type: Mapped[TenantType] = mapped_column(
        String(20),
        nullable=False,
        default=TenantType.CLIENT,
        comment="client, esn or msp"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Inactive domains never resolve"
    )

    branding: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Company name, logo, colors, custom stylesheet"
    )

    ui_config: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Selector toggles and theme"
    )

    # "metadata" is reserved on declarative classes
    extra_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON,
        default=dict,
        nullable=False,
        comment="Free-form annotations"
    )

    created_by: Mapped[str | None] = mapped_column(
        String(36),
        nullable=True,
        comment="User who registered the domain"
    )

    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="tenant_domains",
        lazy="selectin",
    )

    access_config: Mapped[Optional["TenantAccessConfig"]] = relationship(
        "TenantAccessConfig",
        back_populates="tenant_domain",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_tenant_domain_active_type", "is_active", "tenant_type"),
    )

    def __repr__(self) -> str:
        return f"<TenantDomain(id={self.id}, domain_name={self.domain_name})>"


class TenantAccessConfig(BaseModel):
    """Modules a tenant domain exposes (1:1 with TenantDomain)."""

    __tablename__ = "tenant_access_configs"

    tenant_domain_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenant_domains.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        comment="Configured tenant domain"
    )

    organization_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
        comment="Copy of the domain's organization, for filtering"
    )

    access_type: Mapped[AccessType] = mapped_column(
        String(20),
        nullable=False,
        default=AccessType.FULL,
    )

    allowed_modules: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="Module identifiers; '*' stands for the tenant type defaults"
    )

    access_restrictions: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        comment="Reserved extension point"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    tenant_domain: Mapped["TenantDomain"] = relationship(
        "TenantDomain",
        back_populates="access_config",
    )

    def __repr__(self) -> str:
        return f"<TenantAccessConfig(tenant_domain_id={self.tenant_domain_id})>"
