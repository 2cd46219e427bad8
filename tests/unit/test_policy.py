"""
Unit tests for access policy evaluation and portal config derivation.
"""

import pytest

from app.features.portal.modules import (
    CLIENT_MODULES,
    ESN_MODULES,
    FALLBACK_MODULES,
    MSP_MODULES,
    expand_modules,
)
from app.features.portal.policy import build_portal_config, evaluate, is_msp_context
from app.models.tenant import TenantType
from app.schemas.portal import PortalType
from app.schemas.tenant import Branding, TenantUIConfig
from tests.factories import build_principal, build_resolution

ADMIN = build_principal(is_msp_admin=True)
USER = build_principal()


@pytest.mark.unit
class TestEvaluate:

    def test_deterministic(self):
        tenant = build_resolution(allowed_modules=["dashboard", "itsm"])

        assert evaluate(tenant, USER) == evaluate(tenant, USER)
        assert evaluate(None, ADMIN) == evaluate(None, ADMIN)

    def test_msp_admin_without_tenant(self):
        detection = evaluate(None, ADMIN)

        assert detection.portal_type == PortalType.MSP_ADMIN
        assert detection.is_msp_admin_portal is True
        assert detection.user_access.has_admin_access is True
        assert detection.user_access.can_switch_organizations is True
        assert detection.user_access.accessible_modules == list(MSP_MODULES)
        assert len(detection.user_access.accessible_modules) == 15

    def test_resolved_client_tenant_wins_over_admin_flag(self):
        detection = evaluate(build_resolution(), ADMIN)

        assert detection.portal_type == PortalType.CLIENT_PORTAL
        assert detection.user_access.has_admin_access is False
        assert detection.tenant_info.organization_name == "Acme Corp"

    def test_resolved_esn_tenant_wins_over_admin_flag(self):
        detection = evaluate(build_resolution(tenant_type=TenantType.ESN), ADMIN)

        assert detection.portal_type == PortalType.ESN_PORTAL

    def test_msp_tenant_counts_as_msp_context(self):
        tenant = build_resolution(tenant_type=TenantType.MSP)

        assert is_msp_context(tenant) is True
        assert evaluate(tenant, ADMIN).portal_type == PortalType.MSP_ADMIN
        # Non-admins on the MSP's own domain get the tenant view
        assert evaluate(tenant, USER).portal_type == PortalType.CLIENT_PORTAL

    def test_esn_defaults_without_access_config(self):
        detection = evaluate(build_resolution(tenant_type=TenantType.ESN), USER)

        assert set(detection.user_access.accessible_modules) == {
            "dashboard", "users", "teams", "itsm", "monitoring", "applications",
        }

    def test_client_defaults_without_access_config(self):
        detection = evaluate(build_resolution(), USER)

        assert detection.user_access.accessible_modules == list(CLIENT_MODULES)

    def test_configured_modules(self):
        detection = evaluate(build_resolution(allowed_modules=["dashboard", "itsm"]), USER)

        assert detection.user_access.accessible_modules == ["dashboard", "itsm"]

    def test_empty_or_inactive_config_uses_defaults(self):
        empty = evaluate(build_resolution(allowed_modules=[]), USER)
        inactive = evaluate(build_resolution(allowed_modules=["itsm"], config_active=False), USER)

        assert empty.user_access.accessible_modules == list(CLIENT_MODULES)
        assert inactive.user_access.accessible_modules == list(CLIENT_MODULES)

    def test_wildcard_expands_to_type_defaults(self):
        detection = evaluate(
            build_resolution(tenant_type=TenantType.ESN, allowed_modules=["*", "security"]),
            USER,
        )

        assert detection.user_access.accessible_modules == list(ESN_MODULES) + ["security"]

    @pytest.mark.parametrize("principal", [None, USER])
    def test_fallback_without_tenant(self, principal):
        detection = evaluate(None, principal)

        assert detection.portal_type == PortalType.CLIENT_PORTAL
        assert detection.tenant_info is None
        assert detection.user_access.accessible_modules == list(FALLBACK_MODULES)


@pytest.mark.unit
class TestExpandModules:

    def test_dedupes_keeping_order(self):
        assert expand_modules(["itsm", "*", "itsm"], TenantType.CLIENT)[0] == "itsm"
        assert len(expand_modules(["itsm", "*"], TenantType.CLIENT)) == len(CLIENT_MODULES)


@pytest.mark.unit
class TestBuildPortalConfig:

    def test_msp_admin_defaults(self):
        config = build_portal_config(evaluate(None, ADMIN), None)

        assert config.type == PortalType.MSP_ADMIN
        assert config.branding.company_name == "Administration MSP"
        assert config.branding.primary_color == "#3b82f6"
        assert config.ui_config.show_organization_selector is True
        assert config.features.cross_organization_view is True
        assert config.tenant_domain is None

    def test_client_portal_with_custom_branding(self):
        tenant = build_resolution(
            branding=Branding(company_name="Acme Corp", primary_color="#111111"),
            allowed_modules=["dashboard", "itsm"],
        )

        config = build_portal_config(evaluate(tenant, USER), tenant)

        assert config.branding.company_name == "Acme Corp"
        assert config.branding.primary_color == "#111111"
        assert config.branding.accent_color == "#047857"
        assert config.allowed_modules == ["dashboard", "itsm"]
        assert config.features.user_management is False
        assert config.features.cloud_management is False
        assert config.tenant_domain == "acme"
        assert config.organization_id == "org-1"

    def test_client_defaults_use_organization_name(self):
        tenant = build_resolution(organization_name="Globex")

        config = build_portal_config(evaluate(tenant, USER), tenant)

        assert config.branding.company_name == "Globex"
        assert config.branding.primary_color == "#059669"
        assert config.ui_config.show_msp_branding is False
        assert config.features.user_management is True

    def test_blank_branding_keeps_defaults(self):
        tenant = build_resolution(branding=Branding(company_name="", logo="https://cdn/logo.png"))

        config = build_portal_config(evaluate(tenant, USER), tenant)

        assert config.branding.company_name == "Acme Corp"
        assert config.branding.logo == "https://cdn/logo.png"

    def test_ui_config_overlay(self):
        tenant = build_resolution(ui_config=TenantUIConfig(theme="dark", show_team_selector=False))

        config = build_portal_config(evaluate(tenant, USER), tenant)

        assert config.ui_config.theme == "dark"
        assert config.ui_config.show_team_selector is False
        assert config.ui_config.show_organization_selector is False
