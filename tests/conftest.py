"""
Pytest fixtures for all tests.

Provides:
- In-memory SQLite directory with a fresh schema per test
- HTTP client bound to the app with the database dependency overridden
- Organizations, tenant domains and users for the common scenarios
- Tokens and auth headers for MSP admins and client users
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.main import create_application
from app.models import Organization, OrganizationType, TenantDomain, TenantType, User
from tests.factories import TENANT_HOST, OrganizationFactory, TenantDomainFactory, UserFactory

# One connection shared by every session, so the in-memory database survives
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_db_engine():
    """Create the schema on a throwaway in-memory database."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and the app under test."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def app(db_session: AsyncSession):
    """
    FastAPI application with the database dependency pointed at the test session.

    The lifespan does not run, so the Redis cache stays disabled.
    """
    application = create_application()

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for the app.

    The default Host ("test") resolves to no tenant, i.e. the MSP domain.
    Send X-Forwarded-Host to address a tenant domain.
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def msp_organization(db_session: AsyncSession) -> Organization:
    return await OrganizationFactory.create(
        db_session, name="Example MSP", type=OrganizationType.MSP.value
    )


@pytest_asyncio.fixture
async def client_organization(db_session: AsyncSession) -> Organization:
    return await OrganizationFactory.create(db_session, name="Acme Corp")


@pytest_asyncio.fixture
async def tenant_domain(
    db_session: AsyncSession,
    client_organization: Organization,
) -> TenantDomain:
    """Active client domain for Acme, reachable as acme.portal.example.com."""
    return await TenantDomainFactory.create(
        db_session,
        client_organization,
        domain_name="acme",
        full_url=f"https://{TENANT_HOST}",
        tenant_type=TenantType.CLIENT.value,
        branding={"company_name": "Acme", "primary_color": "#ff0000"},
    )


@pytest_asyncio.fixture
async def msp_admin(db_session: AsyncSession, msp_organization: Organization) -> User:
    return await UserFactory.create(
        db_session,
        email="admin@msp.example.com",
        password="Admin123!",
        is_msp_admin=True,
        default_organization_id=msp_organization.id,
    )


@pytest_asyncio.fixture
async def client_user(db_session: AsyncSession, client_organization: Organization) -> User:
    return await UserFactory.create(
        db_session,
        email="user@acme.example.com",
        password="User123!",
        default_organization_id=client_organization.id,
    )


@pytest.fixture
def msp_admin_token(msp_admin: User) -> str:
    return create_access_token(subject=msp_admin.id)


@pytest.fixture
def client_user_token(client_user: User) -> str:
    return create_access_token(subject=client_user.id)


@pytest.fixture
def admin_headers(msp_admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {msp_admin_token}"}


@pytest.fixture
def user_headers(client_user_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {client_user_token}"}
