"""
Tenant domain administration.

Every write invalidates the cached resolutions so portal refreshes see the
change without waiting for the cache TTL.
"""

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.core.cache import cache_manager
from app.core.exceptions import conflict, not_found
from app.core.tenant import build_preview_url
from app.features.portal.modules import ALL_MODULES_WILDCARD
from app.features.tenants.resolver import CACHE_NAMESPACE
from app.models.organization import Organization
from app.models.tenant import AccessType, TenantAccessConfig, TenantDomain
from app.schemas.tenant import (
    DomainAvailability,
    TenantAccessConfigUpdate,
    TenantDomainCreate,
    TenantDomainUpdate,
    TenantFilters,
    TenantPreview,
)

logger = structlog.get_logger(__name__)


class TenantService:
    """CRUD over tenant domains and their access configs."""

    @staticmethod
    def _query():
        return select(TenantDomain).options(
            selectinload(TenantDomain.organization),
            selectinload(TenantDomain.access_config),
        )

    @staticmethod
    async def list_tenants(
        db: AsyncSession,
        filters: TenantFilters,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[TenantDomain], int]:
        """
        Filtered page of tenant domains, newest first.

        Returns:
            (domains, total matching)
        """
        conditions = []
        if filters.tenant_type is not None:
            conditions.append(TenantDomain.tenant_type == filters.tenant_type.value)
        if filters.organization_id is not None:
            conditions.append(TenantDomain.organization_id == filters.organization_id)
        if filters.is_active is not None:
            conditions.append(TenantDomain.is_active.is_(filters.is_active))
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            conditions.append(
                or_(
                    func.lower(TenantDomain.domain_name).like(pattern),
                    func.lower(TenantDomain.full_url).like(pattern),
                )
            )

        total = await db.scalar(
            select(func.count()).select_from(TenantDomain).where(*conditions)
        )
        result = await db.execute(
            TenantService._query()
            .where(*conditions)
            .order_by(TenantDomain.created_at.desc(), TenantDomain.domain_name)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def get_tenant(db: AsyncSession, tenant_id: str) -> TenantDomain:
        """
        Raises:
            HTTPException: 404 if the domain does not exist
        """
        result = await db.execute(
            TenantService._query()
            .where(TenantDomain.id == tenant_id)
            .execution_options(populate_existing=True)
        )
        domain = result.scalar_one_or_none()
        if domain is None:
            raise not_found(f"Tenant domain {tenant_id} not found")
        return domain

    @staticmethod
    async def validate_domain_availability(
        db: AsyncSession,
        domain_name: str,
        exclude_id: str | None = None,
    ) -> DomainAvailability:
        """A domain name is available when no other domain, active or not, uses it."""
        query = select(TenantDomain.id).where(
            func.lower(TenantDomain.domain_name) == domain_name.lower()
        )
        if exclude_id is not None:
            query = query.where(TenantDomain.id != exclude_id)

        taken = await db.scalar(query.limit(1))
        return DomainAvailability(domain_name=domain_name, available=taken is None)

    @staticmethod
    async def _ensure_url_free(
        db: AsyncSession,
        full_url: str,
        exclude_id: str | None = None,
    ) -> None:
        query = select(TenantDomain.id).where(func.lower(TenantDomain.full_url) == full_url.lower())
        if exclude_id is not None:
            query = query.where(TenantDomain.id != exclude_id)
        if await db.scalar(query.limit(1)) is not None:
            raise conflict(f"URL {full_url} is already registered")

    @staticmethod
    async def create_tenant(
        db: AsyncSession,
        data: TenantDomainCreate,
        created_by: str | None = None,
    ) -> TenantDomain:
        """
        Register a tenant domain.

        The owning organization gets an access config exposing the tenant
        type defaults, so the domain serves a usable portal right away.

        Raises:
            HTTPException: 404 unknown organization, 409 domain or URL taken
        """
        organization = await db.get(Organization, data.organization_id)
        if organization is None:
            raise not_found(f"Organization {data.organization_id} not found")

        availability = await TenantService.validate_domain_availability(db, data.domain_name)
        if not availability.available:
            raise conflict(f"Domain {data.domain_name} is already registered")
        await TenantService._ensure_url_free(db, data.full_url)

        domain = TenantDomain(
            domain_name=data.domain_name,
            full_url=data.full_url,
            organization_id=organization.id,
            tenant_type=data.tenant_type.value,
            is_active=True,
            branding=data.branding.to_storage(),
            ui_config=data.ui_config.to_storage(),
            extra_metadata=data.extra_metadata,
            created_by=created_by,
        )
        domain.access_config = TenantAccessConfig(
            organization_id=organization.id,
            access_type=AccessType.FULL.value,
            allowed_modules=[ALL_MODULES_WILDCARD],
            access_restrictions={},
            is_active=True,
        )
        db.add(domain)
        await db.commit()

        logger.info(
            "tenant_domain_created",
            tenant_id=domain.id,
            domain_name=domain.domain_name,
            organization_id=organization.id,
            tenant_type=data.tenant_type.value,
        )
        await cache_manager.invalidate_namespace(CACHE_NAMESPACE)
        return await TenantService.get_tenant(db, domain.id)

    @staticmethod
    async def update_tenant(
        db: AsyncSession,
        tenant_id: str,
        data: TenantDomainUpdate,
    ) -> TenantDomain:
        """Apply the fields set in ``data``."""
        domain = await TenantService.get_tenant(db, tenant_id)
        update_data = data.model_dump(exclude_unset=True)

        if "domain_name" in update_data and update_data["domain_name"] != domain.domain_name:
            availability = await TenantService.validate_domain_availability(
                db, data.domain_name, exclude_id=tenant_id
            )
            if not availability.available:
                raise conflict(f"Domain {data.domain_name} is already registered")
        if "full_url" in update_data:
            await TenantService._ensure_url_free(db, data.full_url, exclude_id=tenant_id)

        for field in update_data:
            value = getattr(data, field)
            if value is None and field in ("domain_name", "full_url", "tenant_type", "is_active"):
                continue
            if field in ("branding", "ui_config"):
                value = value.to_storage() if value is not None else {}
            elif field == "extra_metadata" and value is None:
                value = {}
            elif field == "tenant_type":
                value = value.value
            setattr(domain, field, value)

        await db.commit()
        logger.info("tenant_domain_updated", tenant_id=tenant_id, fields=sorted(update_data))
        await cache_manager.invalidate_namespace(CACHE_NAMESPACE)
        return await TenantService.get_tenant(db, tenant_id)

    @staticmethod
    async def set_active(db: AsyncSession, tenant_id: str, is_active: bool) -> TenantDomain:
        """Activate or deactivate; inactive domains stop resolving."""
        domain = await TenantService.get_tenant(db, tenant_id)
        domain.is_active = is_active
        await db.commit()

        logger.info("tenant_domain_toggled", tenant_id=tenant_id, is_active=is_active)
        await cache_manager.invalidate_namespace(CACHE_NAMESPACE)
        return await TenantService.get_tenant(db, tenant_id)

    @staticmethod
    async def delete_tenant(db: AsyncSession, tenant_id: str) -> None:
        """Delete a domain together with its access config."""
        domain = await TenantService.get_tenant(db, tenant_id)
        await db.delete(domain)
        await db.commit()

        logger.info("tenant_domain_deleted", tenant_id=tenant_id, domain_name=domain.domain_name)
        await cache_manager.invalidate_namespace(CACHE_NAMESPACE)

    @staticmethod
    async def get_access_config(db: AsyncSession, tenant_id: str) -> TenantAccessConfig:
        domain = await TenantService.get_tenant(db, tenant_id)
        if domain.access_config is None:
            raise not_found(f"Tenant domain {tenant_id} has no access config")
        return domain.access_config

    @staticmethod
    async def upsert_access_config(
        db: AsyncSession,
        tenant_id: str,
        data: TenantAccessConfigUpdate,
    ) -> TenantAccessConfig:
        """Create or replace the access config of a domain for its owner."""
        domain = await TenantService.get_tenant(db, tenant_id)
        config = domain.access_config

        if config is None:
            config = TenantAccessConfig(organization_id=domain.organization_id)
            domain.access_config = config

        config.access_type = data.access_type.value
        config.allowed_modules = list(data.allowed_modules)
        config.access_restrictions = dict(data.access_restrictions)
        config.is_active = data.is_active
        await db.commit()

        logger.info(
            "tenant_access_config_saved",
            tenant_id=tenant_id,
            access_type=data.access_type.value,
            module_count=len(data.allowed_modules),
        )
        await cache_manager.invalidate_namespace(CACHE_NAMESPACE)
        domain = await TenantService.get_tenant(db, tenant_id)
        return domain.access_config

    @staticmethod
    def preview(domain_name: str) -> TenantPreview:
        return TenantPreview(
            domain_name=domain_name,
            preview_url=build_preview_url(domain_name, settings.tenant_preview_base_domain),
        )


# Singleton instance
tenant_service = TenantService()
