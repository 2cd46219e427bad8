"""
Tenant domain administration endpoints (MSP admins only).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import bad_request, not_found
from app.features.portal.dependencies import Resolver
from app.features.portal.guard import MSPAdmin, require_msp_admin
from app.features.tenants.service import tenant_service
from app.models.tenant import TenantType
from app.schemas.common import PaginatedResponse
from app.schemas.tenant import (
    DomainAvailability,
    TenantAccessConfigRead,
    TenantAccessConfigUpdate,
    TenantDomainCreate,
    TenantDomainRead,
    TenantDomainUpdate,
    TenantFilters,
    TenantPreview,
    TenantResolution,
    clean_domain_name,
)

router = APIRouter(
    prefix="/admin/tenants",
    tags=["Tenant administration"],
    dependencies=[Depends(require_msp_admin)],
)

DB = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=PaginatedResponse[TenantDomainRead])
async def list_tenants(
    db: DB,
    tenant_type: TenantType | None = Query(None),
    organization_id: str | None = Query(None),
    is_active: bool | None = Query(None),
    search: str | None = Query(None, max_length=255),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[TenantDomainRead]:
    filters = TenantFilters(
        tenant_type=tenant_type,
        organization_id=organization_id,
        is_active=is_active,
        search=search,
    )
    domains, total = await tenant_service.list_tenants(db, filters, skip=skip, limit=limit)
    return PaginatedResponse[TenantDomainRead](
        items=[TenantDomainRead.model_validate(domain) for domain in domains],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=TenantDomainRead, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    data: TenantDomainCreate,
    db: DB,
    admin: MSPAdmin,
) -> TenantDomainRead:
    """
    Register a tenant domain.

    The owning organization is granted the tenant type's default modules.
    """
    domain = await tenant_service.create_tenant(db, data, created_by=admin.id)
    return TenantDomainRead.model_validate(domain)


@router.get("/availability", response_model=DomainAvailability)
async def check_availability(
    db: DB,
    domain_name: str = Query(..., min_length=1, max_length=255),
) -> DomainAvailability:
    return await tenant_service.validate_domain_availability(db, domain_name.strip().lower())


@router.get("/preview-url", response_model=TenantPreview)
async def preview_url(domain_name: str = Query(..., min_length=1, max_length=255)) -> TenantPreview:
    try:
        cleaned = clean_domain_name(domain_name)
    except ValueError as e:
        raise bad_request(str(e))
    return tenant_service.preview(cleaned)


@router.get("/resolve", response_model=TenantResolution)
async def resolve_domain(
    resolver: Resolver,
    domain: str = Query(..., min_length=1, description="Hostname or label to resolve"),
) -> TenantResolution:
    """
    Resolve a hostname the way a portal request would, bypassing the cache.

    Directory failures surface as 503 instead of "no tenant".
    """
    resolution = await resolver.resolve_by_domain(domain)
    if resolution is None:
        raise not_found(f"No active tenant serves {domain}")
    return resolution


@router.get("/{tenant_id}", response_model=TenantDomainRead)
async def get_tenant(tenant_id: str, db: DB) -> TenantDomainRead:
    return TenantDomainRead.model_validate(await tenant_service.get_tenant(db, tenant_id))


@router.patch("/{tenant_id}", response_model=TenantDomainRead)
async def update_tenant(
    tenant_id: str,
    data: TenantDomainUpdate,
    db: DB,
) -> TenantDomainRead:
    domain = await tenant_service.update_tenant(db, tenant_id, data)
    return TenantDomainRead.model_validate(domain)


@router.post("/{tenant_id}/activate", response_model=TenantDomainRead)
async def activate_tenant(tenant_id: str, db: DB) -> TenantDomainRead:
    domain = await tenant_service.set_active(db, tenant_id, True)
    return TenantDomainRead.model_validate(domain)


@router.post("/{tenant_id}/deactivate", response_model=TenantDomainRead)
async def deactivate_tenant(tenant_id: str, db: DB) -> TenantDomainRead:
    domain = await tenant_service.set_active(db, tenant_id, False)
    return TenantDomainRead.model_validate(domain)


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(tenant_id: str, db: DB) -> Response:
    """Delete a domain and its access config."""
    await tenant_service.delete_tenant(db, tenant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{tenant_id}/access-config", response_model=TenantAccessConfigRead)
async def get_access_config(tenant_id: str, db: DB) -> TenantAccessConfigRead:
    return TenantAccessConfigRead.model_validate(
        await tenant_service.get_access_config(db, tenant_id)
    )


@router.put("/{tenant_id}/access-config", response_model=TenantAccessConfigRead)
async def put_access_config(
    tenant_id: str,
    data: TenantAccessConfigUpdate,
    db: DB,
) -> TenantAccessConfigRead:
    config = await tenant_service.upsert_access_config(db, tenant_id, data)
    return TenantAccessConfigRead.model_validate(config)
