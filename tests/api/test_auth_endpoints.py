"""
API tests for authentication endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.api
class TestAuthEndpoints:

    async def test_login_form(self, client: AsyncClient, msp_admin):
        response = await client.post(
            "/api/v1/auth/login",
            data={"username": "admin@msp.example.com", "password": "Admin123!"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["expires_in"] > 0

    async def test_login_json(self, client: AsyncClient, client_user):
        response = await client.post(
            "/api/v1/auth/login/json",
            json={"email": "user@acme.example.com", "password": "User123!"},
        )

        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, client_user):
        response = await client.post(
            "/api/v1/auth/login/json",
            json={"email": "user@acme.example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_refresh(self, client: AsyncClient, client_user):
        login = await client.post(
            "/api/v1/auth/login/json",
            json={"email": "user@acme.example.com", "password": "User123!"},
        )

        response = await client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": login.json()["refresh_token"]},
        )

        assert response.status_code == 200
        assert response.json()["access_token"]

    async def test_refresh_with_garbage(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})

        assert response.status_code == 401

    async def test_me_returns_principal(self, client: AsyncClient, msp_admin, admin_headers):
        response = await client.get("/api/v1/auth/me", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == msp_admin.id
        assert data["is_msp_admin"] is True
        assert "hashed_password" not in data

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401

    async def test_me_rejects_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401

    async def test_logout(self, client: AsyncClient, user_headers):
        response = await client.post("/api/v1/auth/logout", headers=user_headers)

        assert response.status_code == 200
