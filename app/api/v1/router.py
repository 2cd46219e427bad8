"""
API v1 router aggregator.

All v1 routes are registered here.
"""

from fastapi import APIRouter

from app.features.auth.router import router as auth_router
from app.features.organizations.router import router as organizations_router
from app.features.portal.router import router as portal_router
from app.features.tenants.router import router as tenants_router

# V1 API router
v1_router = APIRouter(prefix="/v1")

v1_router.include_router(auth_router)
v1_router.include_router(portal_router)
v1_router.include_router(tenants_router)
v1_router.include_router(organizations_router)
