"""Integration tests for authentication endpoints."""

from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def new_account() -> dict:
    return {
        "name": "Test Student",
        "email": "teststudent@example.edu",
        "password": "testpassword123",
        "institution": "State University",
    }


async def test_register_success(async_client: AsyncClient, new_account: dict) -> None:
    response = await async_client.post("/auth/register", json=new_account)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["message"] == "Registration successful"
    assert data["account"]["email"] == new_account["email"]
    assert data["account"]["institution"] == "State University"
    assert data["account"]["phone"] is None
    assert "hashed_password" not in data["account"]
    assert data["token"]["token_type"] == "bearer"
    assert data["token"]["access_token"]


async def test_register_duplicate_email(async_client: AsyncClient, new_account: dict) -> None:
    await async_client.post("/auth/register", json=new_account)

    response = await async_client.post(
        "/auth/register", json={**new_account, "email": new_account["email"].upper()}
    )

    assert response.status_code == status.HTTP_409_CONFLICT
    assert "already exists" in response.json()["detail"]


async def test_register_rejects_short_password(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/auth/register",
        json={"name": "Shorty", "email": "short@example.edu", "password": "short"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


async def test_login_and_me_report_default_role(
    async_client: AsyncClient, new_account: dict
) -> None:
    await async_client.post("/auth/register", json=new_account)

    login = await async_client.post(
        "/auth/login",
        json={"email": new_account["email"], "password": new_account["password"]},
    )
    assert login.status_code == status.HTTP_200_OK
    token = login.json()["token"]["access_token"]

    response = await async_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["account"]["name"] == new_account["name"]
    assert data["role"] == "user"


async def test_me_reports_assigned_role(
    async_client: AsyncClient, moderator_headers: dict[str, str]
) -> None:
    response = await async_client.get("/auth/me", headers=moderator_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["role"] == "moderator"


async def test_login_wrong_password(async_client: AsyncClient, new_account: dict) -> None:
    await async_client.post("/auth/register", json=new_account)

    response = await async_client.post(
        "/auth/login", json={"email": new_account["email"], "password": "wrongpassword"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "Invalid email or password" in response.json()["detail"]


async def test_me_without_token(async_client: AsyncClient) -> None:
    response = await async_client.get("/auth/me")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_me_with_garbage_token(async_client: AsyncClient) -> None:
    response = await async_client.get(
        "/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
