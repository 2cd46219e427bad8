"""
Dependencies that build a refreshed portal session per request.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import cache_manager
from app.core.database import get_db
from app.core.middleware import extract_origin
from app.features.auth.dependencies import OptionalPrincipal
from app.features.portal.session import PortalSession
from app.features.tenants.directory import SqlTenantDirectory
from app.features.tenants.resolver import TenantResolver


async def get_tenant_resolver(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TenantResolver:
    return TenantResolver(SqlTenantDirectory(db), cache=cache_manager)


async def get_portal_session(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    principal: OptionalPrincipal,
):
    """
    Portal session for the request origin and caller, already refreshed.

    The session is closed once the response is sent.
    """
    origin = getattr(request.state, "origin", None) or extract_origin(request)
    session = PortalSession(resolver, origin=origin, principal=principal)
    await session.refresh()
    try:
        yield session
    finally:
        session.close()


Resolver = Annotated[TenantResolver, Depends(get_tenant_resolver)]
Session = Annotated[PortalSession, Depends(get_portal_session)]
