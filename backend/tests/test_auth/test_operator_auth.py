"""Tests for operator login and bearer token protection."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from riadops.auth.dependencies import verify_ops_password
from riadops.auth.jwt import create_access_token
from riadops.config import settings

pytestmark = pytest.mark.asyncio


class TestVerifyOpsPassword:
    def test_correct(self):
        assert verify_ops_password(settings.ops_password)

    def test_wrong(self):
        assert not verify_ops_password(settings.ops_password + "x")


class TestLogin:
    async def test_login_success(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/login", json={"password": settings.ops_password})
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        me = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        assert me.status_code == 200
        assert me.json()["message"] == "Authenticated as operator"

    async def test_login_wrong_password(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/login", json={"password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid password"

    async def test_login_missing_password(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/login", json={})
        assert response.status_code == 422


class TestProtectedRoutes:
    async def test_no_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/guests")
        assert response.status_code in (401, 403)

    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/guests", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    async def test_expired_token(self, client: AsyncClient) -> None:
        token = create_access_token({"sub": "operator"}, expires_delta=timedelta(seconds=-5))
        response = await client.get("/api/v1/guests", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_wrong_subject(self, client: AsyncClient) -> None:
        token = create_access_token({"sub": "someone-else"})
        response = await client.get("/api/v1/guests", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_foreign_signature(self, client: AsyncClient) -> None:
        token = jwt.encode({"sub": "operator", "type": "access"}, "other-secret", algorithm="HS256")
        response = await client.get("/api/v1/guests", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
