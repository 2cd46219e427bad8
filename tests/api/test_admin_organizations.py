"""
API tests for the organization directory.
"""

import pytest
from httpx import AsyncClient

BASE = "/api/v1/admin/organizations"


@pytest.mark.api
class TestOrganizationEndpoints:

    async def test_requires_admin(self, client: AsyncClient, user_headers):
        response = await client.get(BASE, headers=user_headers)

        assert response.status_code == 403

    async def test_create_msp_sets_flag(self, client: AsyncClient, admin_headers):
        response = await client.post(
            BASE, headers=admin_headers, json={"name": "Partner MSP", "type": "msp"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "msp"
        assert data["is_msp"] is True

    async def test_list_by_type(self, client: AsyncClient, admin_headers, client_organization):
        response = await client.get(BASE, headers=admin_headers, params={"type": "client"})

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Acme Corp"

    async def test_get(self, client: AsyncClient, admin_headers, client_organization):
        found = await client.get(f"{BASE}/{client_organization.id}", headers=admin_headers)
        missing = await client.get(f"{BASE}/missing", headers=admin_headers)

        assert found.json()["id"] == client_organization.id
        assert missing.status_code == 404
