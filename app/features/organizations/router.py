"""
Organization directory endpoints (MSP admins only).
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import not_found
from app.features.portal.guard import require_msp_admin
from app.models.organization import Organization, OrganizationType
from app.schemas.common import PaginatedResponse
from app.schemas.organization import OrganizationCreate, OrganizationRead

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/admin/organizations",
    tags=["Organization administration"],
    dependencies=[Depends(require_msp_admin)],
)


@router.get("", response_model=PaginatedResponse[OrganizationRead])
async def list_organizations(
    db: Annotated[AsyncSession, Depends(get_db)],
    type: OrganizationType | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[OrganizationRead]:
    conditions = [Organization.type == type.value] if type is not None else []

    total = await db.scalar(select(func.count()).select_from(Organization).where(*conditions))
    result = await db.execute(
        select(Organization)
        .where(*conditions)
        .order_by(Organization.name)
        .offset(skip)
        .limit(limit)
    )
    return PaginatedResponse[OrganizationRead](
        items=[OrganizationRead.model_validate(org) for org in result.scalars().all()],
        total=total or 0,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=OrganizationRead, status_code=status.HTTP_201_CREATED)
async def create_organization(
    data: OrganizationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationRead:
    organization = Organization(name=data.name, type=data.type.value, is_msp=data.is_msp)
    db.add(organization)
    await db.commit()
    await db.refresh(organization)

    logger.info("organization_created", organization_id=organization.id, type=data.type.value)
    return OrganizationRead.model_validate(organization)


@router.get("/{organization_id}", response_model=OrganizationRead)
async def get_organization(
    organization_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrganizationRead:
    organization = await db.get(Organization, organization_id)
    if organization is None:
        raise not_found(f"Organization {organization_id} not found")
    return OrganizationRead.model_validate(organization)
