"""
Tenant directory lookups.

The portal core talks to the directory only through the TenantDirectory
protocol, so resolution can be exercised against any store.
"""

from typing import Protocol

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.tenant import url_variants
from app.models.tenant import TenantAccessConfig, TenantDomain
from app.schemas.tenant import TenantAccessConfigRead, TenantDomainRead

class TenantDirectory(Protocol):
    """Read-only view of the tenant directory used by resolution."""

    async def find_active_tenant_domain_by_origin(self, origin: str) -> TenantDomainRead | None:
        """Active domain whose domain_name or full_url matches ``origin``."""
        ...

    async def find_access_config(
        self,
        tenant_domain_id: str,
        organization_id: str,
    ) -> TenantAccessConfigRead | None:
        """Active access config of a domain for its owning organization."""
        ...


class SqlTenantDirectory:
    """TenantDirectory backed by the SQLAlchemy session of the request."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_active_tenant_domain_by_origin(self, origin: str) -> TenantDomainRead | None:
        value = origin.lower()
        result = await self.db.execute(
            select(TenantDomain)
            .options(
                selectinload(TenantDomain.organization),
                selectinload(TenantDomain.access_config),
            )
            .where(
                TenantDomain.is_active.is_(True),
                or_(
                    func.lower(TenantDomain.domain_name) == value,
                    func.lower(TenantDomain.full_url).in_(url_variants(value)),
                ),
            )
            .order_by(TenantDomain.created_at)
            .limit(1)
        )
        domain = result.scalar_one_or_none()

        if domain is None:
            return None
        return TenantDomainRead.model_validate(domain)

    async def find_access_config(
        self,
        tenant_domain_id: str,
        organization_id: str,
    ) -> TenantAccessConfigRead | None:
        result = await self.db.execute(
            select(TenantAccessConfig).where(
                TenantAccessConfig.tenant_domain_id == tenant_domain_id,
                TenantAccessConfig.organization_id == organization_id,
                TenantAccessConfig.is_active.is_(True),
            )
        )
        config = result.scalar_one_or_none()

        if config is None:
            return None
        return TenantAccessConfigRead.model_validate(config)
