"""
API tests for the portal endpoints.

The default test host resolves to no tenant (the MSP domain); tenant
domains are addressed through X-Forwarded-Host.
"""

import pytest
from httpx import AsyncClient

from app.config import settings
from app.features.portal.modules import FALLBACK_MODULES, MODULE_NAMESPACE, MSP_MODULES

from tests.factories import TENANT_HOST, TenantDomainFactory

TENANT = {"X-Forwarded-Host": TENANT_HOST}


@pytest.mark.api
class TestPortalDetection:

    async def test_anonymous_on_msp_domain_gets_fallback(self, client: AsyncClient):
        response = await client.get("/api/v1/portal")

        assert response.status_code == 200
        state = response.json()
        assert state["loading"] is False
        assert state["error"] is None
        assert state["portal_detection"]["portal_type"] == "client_portal"
        assert state["portal_config"]["allowed_modules"] == list(FALLBACK_MODULES)
        assert state["portal_config"]["branding"]["company_name"] == "Client Portal"

    async def test_msp_admin_on_msp_domain(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/v1/portal/detection", headers=admin_headers)

        detection = response.json()
        assert detection["portal_type"] == "msp_admin"
        assert detection["is_msp_admin_portal"] is True
        assert detection["user_access"]["has_admin_access"] is True
        assert detection["user_access"]["accessible_modules"] == list(MSP_MODULES)

    async def test_tenant_domain_serves_client_portal(self, client: AsyncClient, tenant_domain, user_headers):
        response = await client.get("/api/v1/portal/config", headers={**TENANT, **user_headers})

        config = response.json()
        assert config["type"] == "client_portal"
        assert config["tenant_domain"] == "acme"
        assert config["organization_id"] == tenant_domain.organization_id
        assert config["branding"]["company_name"] == "Acme"
        assert config["branding"]["primary_color"] == "#ff0000"
        assert config["ui_config"]["show_msp_branding"] is False

    async def test_admin_flag_does_not_escalate_tenant_domain(
        self, client: AsyncClient, tenant_domain, admin_headers
    ):
        response = await client.get("/api/v1/portal/detection", headers={**TENANT, **admin_headers})

        detection = response.json()
        assert detection["portal_type"] == "client_portal"
        assert detection["user_access"]["has_admin_access"] is False

    async def test_configured_modules_are_served(self, client: AsyncClient, db_session, client_organization):
        await TenantDomainFactory.create(
            db_session,
            client_organization,
            domain_name="initech",
            branding={"company_name": "Acme Corp", "primary_color": "#111111"},
            access_config={"allowed_modules": ["dashboard", "itsm"]},
        )

        response = await client.get(
            "/api/v1/portal/config",
            headers={"X-Forwarded-Host": "initech.portal.example.com"},
        )

        config = response.json()
        assert config["allowed_modules"] == ["dashboard", "itsm"]
        assert config["branding"]["company_name"] == "Acme Corp"
        assert config["features"]["user_management"] is False

    async def test_esn_domain(self, client: AsyncClient, db_session, client_organization):
        await TenantDomainFactory.create(
            db_session, client_organization, domain_name="partner", tenant_type="esn"
        )

        response = await client.get(
            "/api/v1/portal/detection",
            headers={"X-Forwarded-Host": "partner.portal.example.com"},
        )

        assert response.json()["portal_type"] == "esn_portal"

    async def test_refresh(self, client: AsyncClient, admin_headers):
        response = await client.post("/api/v1/portal/refresh", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["portal_config"]["type"] == "msp_admin"


@pytest.mark.api
class TestModulePermissions:

    async def test_lists_whole_namespace(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/v1/portal/modules", headers=admin_headers)

        permissions = response.json()
        assert [p["module_id"] for p in permissions] == list(MODULE_NAMESPACE)
        levels = {p["module_id"]: p["access_level"] for p in permissions}
        assert levels["tenant-management"] == "admin"
        assert levels["profile"] == "none"

    async def test_single_module_on_tenant(self, client: AsyncClient, tenant_domain):
        monitoring = await client.get("/api/v1/portal/modules/monitoring", headers=TENANT)
        itsm = await client.get("/api/v1/portal/modules/itsm", headers=TENANT)
        rbac = await client.get("/api/v1/portal/modules/rbac", headers=TENANT)

        assert monitoring.json()["access_level"] == "read"
        assert itsm.json()["access_level"] == "write"
        assert rbac.json() == {"module_id": "rbac", "access_level": "none", "visible": False}

    async def test_unknown_module(self, client: AsyncClient):
        response = await client.get("/api/v1/portal/modules/payroll")

        assert response.status_code == 404


@pytest.mark.api
class TestSwitchToMsp:

    async def test_admin_is_redirected(self, client: AsyncClient, tenant_domain, admin_headers):
        response = await client.get("/api/v1/portal/switch-to-msp", headers={**TENANT, **admin_headers})

        assert response.status_code == 307
        assert response.headers["location"] == settings.msp_admin_url

    async def test_non_admin_stays(self, client: AsyncClient, user_headers):
        response = await client.get("/api/v1/portal/switch-to-msp", headers=user_headers)

        assert response.status_code == 204
