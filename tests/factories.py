"""
Factory pattern for creating test data.

Provides easy-to-use functions for creating directory rows
with sensible defaults and optional overrides.
"""

from typing import Any

from faker import Faker
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.models import Organization, TenantAccessConfig, TenantDomain, User
from app.models.organization import OrganizationType
from app.models.tenant import AccessType, TenantType
from app.schemas.tenant import TenantAccessConfigRead, TenantResolution
from app.schemas.user import Principal

fake = Faker()

# Host the shared tenant_domain fixture is served from
TENANT_HOST = "acme.portal.example.com"


class OrganizationFactory:
    """Factory for creating test organizations."""

    @staticmethod
    async def create(db: AsyncSession, **kwargs: Any) -> Organization:
        """
        Usage:
            org = await OrganizationFactory.create(db, type="esn")
        """
        defaults = {
            "name": fake.company(),
            "type": OrganizationType.CLIENT.value,
        }
        defaults.update(kwargs)

        organization = Organization(**defaults)
        db.add(organization)
        await db.commit()
        await db.refresh(organization)
        return organization


class TenantDomainFactory:
    """Factory for creating tenant domains, optionally with an access config."""

    @staticmethod
    async def create(
        db: AsyncSession,
        organization: Organization,
        access_config: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> TenantDomain:
        """
        Create a tenant domain owned by ``organization``.

        Usage:
            domain = await TenantDomainFactory.create(
                db, org, access_config={"allowed_modules": ["dashboard"]}
            )
        """
        label = kwargs.get("domain_name") or fake.unique.domain_word()
        defaults = {
            "domain_name": label,
            "full_url": f"https://{label}.portal.example.com",
            "organization_id": organization.id,
            "tenant_type": TenantType.CLIENT.value,
            "is_active": True,
            "branding": {},
            "ui_config": {},
            "extra_metadata": {},
        }
        defaults.update(kwargs)

        domain = TenantDomain(**defaults)
        if access_config is not None:
            config = {
                "organization_id": organization.id,
                "access_type": AccessType.FULL.value,
                "allowed_modules": [],
                "access_restrictions": {},
                "is_active": True,
            }
            config.update(access_config)
            domain.access_config = TenantAccessConfig(**config)

        db.add(domain)
        await db.commit()
        await db.refresh(domain)
        return domain


class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create(db: AsyncSession, **kwargs: Any) -> User:
        """
        Usage:
            admin = await UserFactory.create(db, is_msp_admin=True)
        """
        password = kwargs.pop("password", "Test123!")

        defaults = {
            "email": fake.unique.email(),
            "hashed_password": hash_password(password),
            "full_name": fake.name(),
            "is_active": True,
            "is_msp_admin": False,
        }
        defaults.update(kwargs)

        user = User(**defaults)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user


def build_principal(is_msp_admin: bool = False, **kwargs: Any) -> Principal:
    """Principal without a backing user row, for pure policy tests."""
    defaults = {
        "id": fake.uuid4(),
        "email": fake.email(),
        "is_msp_admin": is_msp_admin,
    }
    defaults.update(kwargs)
    return Principal(**defaults)


def build_resolution(
    tenant_type: TenantType = TenantType.CLIENT,
    allowed_modules: list[str] | None = None,
    access_type: AccessType = AccessType.FULL,
    config_active: bool = True,
    **kwargs: Any,
) -> TenantResolution:
    """
    Resolved tenant for policy and session tests.

    An access config is attached only when ``allowed_modules`` is given.
    """
    access_config = None
    if allowed_modules is not None:
        access_config = TenantAccessConfigRead(
            id="cfg-1",
            tenant_domain_id=kwargs.get("tenant_id", "td-1"),
            organization_id="org-1",
            access_type=access_type,
            allowed_modules=allowed_modules,
            is_active=config_active,
        )

    defaults = {
        "tenant_id": "td-1",
        "organization_id": "org-1",
        "organization_name": "Acme Corp",
        "organization_type": OrganizationType.CLIENT,
        "tenant_type": tenant_type,
        "domain_name": "acme",
        "full_url": "https://acme.portal.example.com",
        "access_config": access_config,
    }
    defaults.update(kwargs)
    return TenantResolution(**defaults)
