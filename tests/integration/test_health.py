"""Integration tests for health and authentication."""

import pytest
from httpx import AsyncClient

from promptforge import __version__


@pytest.mark.integration
class TestHealth:
    async def test_liveness(self, client: AsyncClient) -> None:
        response = await client.get("/health/live")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__

    async def test_request_id_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/health/live", headers={"x-request-id": "req-42"})
        assert response.headers["x-request-id"] == "req-42"


@pytest.mark.integration
class TestAuth:
    async def test_missing_auth_header(self, client: AsyncClient) -> None:
        response = await client.get("/v1/templates")
        assert response.status_code == 401
        assert response.json()["error"]["type"] == "authentication_error"

    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get("/v1/templates", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    async def test_register_login_me_logout(self, client: AsyncClient) -> None:
        creds = {"email": "ada@example.com", "password": "analytical"}
        registered = await client.post("/v1/auth/register", json=creds)
        assert registered.status_code == 201

        duplicate = await client.post("/v1/auth/register", json=creds)
        assert duplicate.status_code == 409
        assert duplicate.json()["error"]["message"] == "An account with this email already exists."

        login = await client.post("/v1/auth/login", json=creds)
        assert login.status_code == 200
        headers = {"Authorization": f"Bearer {login.json()['token']}"}

        me = await client.get("/v1/auth/me", headers=headers)
        assert me.json()["email"] == "ada@example.com"

        assert (await client.post("/v1/auth/logout", headers=headers)).status_code == 204
        assert (await client.get("/v1/auth/me", headers=headers)).status_code == 401

    async def test_bad_password(self, client: AsyncClient) -> None:
        await client.post("/v1/auth/register", json={"email": "b@example.com", "password": "secret1"})
        response = await client.post(
            "/v1/auth/login", json={"email": "b@example.com", "password": "wrong"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password."
