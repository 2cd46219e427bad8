"""
Portal endpoints.

Every endpoint reads the session refreshed for the request origin and the
caller; nothing here evaluates policy on its own.
"""

from fastapi import APIRouter, Response, status
from fastapi.responses import RedirectResponse

from app.core.exceptions import not_found
from app.features.portal.dependencies import Session
from app.features.portal.modules import MODULE_NAMESPACE
from app.schemas.portal import ModulePermission, PortalConfig, PortalDetection, PortalState

router = APIRouter(prefix="/portal", tags=["Portal"])


@router.get("", response_model=PortalState)
async def get_portal_state(session: Session) -> PortalState:
    """Detection, configuration, loading flag and last error."""
    return session.state()


@router.get("/config", response_model=PortalConfig | None)
async def get_portal_config(session: Session) -> PortalConfig | None:
    return session.get_portal_config()


@router.get("/detection", response_model=PortalDetection | None)
async def get_portal_detection(session: Session) -> PortalDetection | None:
    return session.get_portal_detection()


@router.get("/modules", response_model=list[ModulePermission])
async def list_module_permissions(session: Session) -> list[ModulePermission]:
    """Permission on every module of the namespace."""
    return session.list_module_permissions()


@router.get("/modules/{module_id}", response_model=ModulePermission)
async def get_module_permission(module_id: str, session: Session) -> ModulePermission:
    if module_id not in MODULE_NAMESPACE:
        raise not_found(f"Unknown module: {module_id}")
    return session.get_module_permission(module_id)


@router.post("/refresh", response_model=PortalState)
async def refresh_portal(session: Session) -> PortalState:
    """
    Force a new resolution, e.g. after an admin edited the tenant.

    The cached resolution may still be served until it expires.
    """
    return await session.refresh()


@router.get("/switch-to-msp")
async def switch_to_msp_portal(session: Session) -> Response:
    """Redirect MSP admins to the MSP admin portal; 204 for everyone else."""
    url = session.switch_to_msp_portal()
    if url is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
