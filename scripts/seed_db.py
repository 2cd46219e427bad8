"""
Seed database with a local development directory.

Creates one MSP, one client organization served at acme.localhost, and
an admin plus a regular user.
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.core.database import db_manager
from app.core.security import hash_password
from app.models import (
    AccessType,
    Organization,
    OrganizationType,
    TenantAccessConfig,
    TenantDomain,
    TenantType,
    User,
)


async def seed_data() -> None:
    """Create initial development data."""
    print("🌱 Seeding database...")

    db_manager.init()

    async for db in db_manager.get_session():
        result = await db.execute(select(Organization))
        if result.first():
            print("⚠️  Database already contains data. Skipping seed.")
            return

        msp = Organization(name="Example MSP", type=OrganizationType.MSP.value, is_msp=True)
        acme = Organization(name="Acme Corporation", type=OrganizationType.CLIENT.value)
        db.add_all([msp, acme])
        await db.flush()

        domain = TenantDomain(
            domain_name="acme",
            full_url="http://acme.localhost:8080",
            organization_id=acme.id,
            tenant_type=TenantType.CLIENT.value,
            branding={"company_name": "Acme", "primary_color": "#d32f2f"},
            ui_config={"theme": "light"},
        )
        db.add(domain)
        await db.flush()

        db.add(TenantAccessConfig(
            tenant_domain_id=domain.id,
            organization_id=acme.id,
            access_type=AccessType.FULL.value,
            allowed_modules=["dashboard", "monitoring", "itsm", "reports", "profile"],
        ))

        admin_user = User(
            email="admin@msp.example.com",
            hashed_password=hash_password("Admin123!"),
            full_name="MSP Admin",
            is_active=True,
            is_msp_admin=True,
            default_organization_id=msp.id,
        )
        regular_user = User(
            email="user@acme.example.com",
            hashed_password=hash_password("User123!"),
            full_name="Acme User",
            is_active=True,
            default_organization_id=acme.id,
        )
        db.add_all([admin_user, regular_user])

        await db.commit()

        print(f"✅ Created organizations: {msp.name}, {acme.name}")
        print(f"✅ Created tenant domain: {domain.full_url}")
        print(f"✅ Created admin: {admin_user.email} (password: Admin123!)")
        print(f"✅ Created user: {regular_user.email} (password: User123!)")

    await db_manager.close()
    print("🎉 Seeding complete!")


if __name__ == "__main__":
    asyncio.run(seed_data())
