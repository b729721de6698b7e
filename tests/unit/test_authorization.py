"""Unit tests for resolving the effective role of an identity."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from src.core.auth import Role
from src.domain import User
from src.domain.services.authorization import AuthorizationResolver
from src.infrastructure.repositories.row_store import RowStore, StoreError

pytestmark = pytest.mark.asyncio

IDENTITY = User(user_id="account-a", email="a@example.edu")


def _role_row(role: str) -> dict:
    return {
        "id": "role-1",
        "account_ref": IDENTITY.user_id,
        "role": role,
        "assigned_by": "admin-1",
        "created_at": None,
    }


@pytest.fixture
def mock_store() -> AsyncMock:
    return AsyncMock(spec=RowStore)


async def test_no_role_row_resolves_to_user(mock_store: AsyncMock) -> None:
    mock_store.read.return_value = []

    context = await AuthorizationResolver(mock_store).resolve(IDENTITY)

    assert context.assignment is None
    assert context.effective_role is Role.USER
    mock_store.read.assert_awaited_once_with(
        "user_roles", filters={"account_ref": IDENTITY.user_id}
    )


@pytest.mark.parametrize("role", ["user", "moderator", "admin"])
async def test_single_role_row_is_authoritative(mock_store: AsyncMock, role: str) -> None:
    mock_store.read.return_value = [_role_row(role)]

    context = await AuthorizationResolver(mock_store).resolve(IDENTITY)

    assert context.effective_role is Role(role)
    assert context.assignment is not None
    assert context.assignment.assigned_by == "admin-1"


async def test_lookup_failure_fails_closed(mock_store: AsyncMock) -> None:
    mock_store.read.side_effect = StoreError("connection reset")

    context = await AuthorizationResolver(mock_store).resolve(IDENTITY)

    assert context.assignment is None
    assert context.effective_role is Role.USER


async def test_unrecognised_role_value_fails_closed(mock_store: AsyncMock) -> None:
    mock_store.read.return_value = [_role_row("superadmin")]

    context = await AuthorizationResolver(mock_store).resolve(IDENTITY)

    assert context.effective_role is Role.USER


async def test_has_any_role(mock_store: AsyncMock) -> None:
    mock_store.read.return_value = [_role_row("moderator")]

    context = await AuthorizationResolver(mock_store).resolve(IDENTITY)

    assert context.has_any_role({Role.MODERATOR, Role.ADMIN})
    assert not context.has_any_role({Role.ADMIN})


async def test_unexpected_lookup_error_fails_closed(mock_store: AsyncMock) -> None:
    mock_store.read.side_effect = RuntimeError("driver blew up")

    context = await AuthorizationResolver(mock_store).resolve(IDENTITY)

    assert context.assignment is None
    assert context.effective_role is Role.USER
