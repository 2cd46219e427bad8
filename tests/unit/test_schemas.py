"""
Unit tests for tenant and organization payload validation.
"""

import pytest
from pydantic import ValidationError

from app.models.organization import OrganizationType
from app.schemas.organization import OrganizationCreate
from app.schemas.tenant import (
    Branding,
    TenantAccessConfigUpdate,
    TenantDomainCreate,
    TenantDomainUpdate,
    TenantUIConfig,
)


@pytest.mark.unit
class TestExtensibleBlobs:

    def test_unknown_keys_are_preserved(self):
        branding = Branding.model_validate(
            {"company_name": "Acme", "primary_color": "#111111", "banner_text": "Welcome"}
        )

        assert branding.company_name == "Acme"
        assert branding.extra == {"banner_text": "Welcome"}

    def test_storage_form_is_flat(self):
        branding = Branding.model_validate({"company_name": "Acme", "banner_text": "Welcome"})

        assert branding.to_storage() == {"company_name": "Acme", "banner_text": "Welcome"}

    def test_dump_is_flat(self):
        branding = Branding.model_validate({"company_name": "Acme", "banner_text": "Welcome"})

        dumped = branding.model_dump(mode="json")

        assert dumped["banner_text"] == "Welcome"
        assert "extra" not in dumped
        assert Branding.model_validate(dumped) == branding

    def test_stored_blob_survives_reload(self):
        stored = {"theme": "dark", "sidebar": {"collapsed": True}}

        assert TenantUIConfig.model_validate(stored).to_storage() == stored

    def test_known_keys_are_still_validated(self):
        with pytest.raises(ValidationError):
            TenantUIConfig.model_validate({"theme": "neon"})


@pytest.mark.unit
class TestTenantDomainPayloads:

    def test_create_normalizes_domain_and_url(self):
        data = TenantDomainCreate(
            domain_name="  ACME.Portal.Example.com ",
            full_url="https://ACME.portal.example.com/",
            organization_id="org-1",
        )

        assert data.domain_name == "acme.portal.example.com"
        assert data.full_url == "https://acme.portal.example.com"

    def test_full_url_needs_scheme(self):
        with pytest.raises(ValidationError):
            TenantDomainCreate(
                domain_name="acme",
                full_url="acme.portal.example.com",
                organization_id="org-1",
            )

    def test_update_leaves_unset_fields_out(self):
        data = TenantDomainUpdate(is_active=False)

        assert data.model_dump(exclude_unset=True) == {"is_active": False}

    def test_access_config_modules_deduplicated(self):
        data = TenantAccessConfigUpdate(allowed_modules=["itsm", " itsm ", "", "dashboard"])

        assert data.allowed_modules == ["itsm", "dashboard"]

    def test_access_config_rejects_unknown_modules(self):
        with pytest.raises(ValidationError, match="dashbord"):
            TenantAccessConfigUpdate(allowed_modules=["dashbord", "itsm"])

    def test_access_config_accepts_wildcard(self):
        assert TenantAccessConfigUpdate(allowed_modules=["*", "security"]).allowed_modules == ["*", "security"]


@pytest.mark.unit
class TestOrganizationPayloads:

    def test_msp_type_sets_flag(self):
        data = OrganizationCreate(name="Example MSP", type="msp", is_msp=False)

        assert data.type == OrganizationType.MSP
        assert data.is_msp is True

    def test_client_keeps_flag_off(self):
        assert OrganizationCreate(name="Acme").is_msp is False
