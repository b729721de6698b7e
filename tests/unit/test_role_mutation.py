"""Unit tests for assigning and removing account roles."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from src.core.auth import Role
from src.domain import User
from src.domain.services.authorization import AuthorizationResolver
from src.domain.services.roles import (
    RoleMutationError,
    RoleMutationService,
    UnknownAccountError,
)
from src.infrastructure.repositories.row_store import RowStore, StoreError

pytestmark = pytest.mark.asyncio

ADMIN_ID = "admin-account"


async def test_assigning_twice_leaves_one_row_with_last_role(
    store: RowStore, create_account
) -> None:
    account_id = await create_account(name="Gus")
    service = RoleMutationService(store)

    await service.assign_role(target_account=account_id, role=Role.MODERATOR, actor=ADMIN_ID)
    result = await service.assign_role(
        target_account=account_id, role=Role.ADMIN, actor=ADMIN_ID
    )

    assert result.refreshed
    assignments = result.items
    assert len(assignments) == 1
    assert assignments[0].account_ref == account_id
    assert assignments[0].role is Role.ADMIN
    assert assignments[0].assigned_by == ADMIN_ID


async def test_assign_then_remove_round_trip_through_resolver(
    store: RowStore, create_account
) -> None:
    account_id = await create_account(name="Account A")
    identity = User(user_id=account_id)
    resolver = AuthorizationResolver(store)
    service = RoleMutationService(store)

    assert (await resolver.resolve(identity)).effective_role is Role.USER

    await service.assign_role(target_account=account_id, role=Role.MODERATOR, actor=ADMIN_ID)
    assert (await resolver.resolve(identity)).effective_role is Role.MODERATOR

    remaining = await service.remove_role(target_account=account_id, actor=ADMIN_ID)
    assert remaining.items == []
    assert (await resolver.resolve(identity)).effective_role is Role.USER


async def test_remove_is_idempotent(store: RowStore, create_account) -> None:
    account_id = await create_account(name="Hal")
    service = RoleMutationService(store)

    first = await service.remove_role(target_account=account_id, actor=ADMIN_ID)
    second = await service.remove_role(target_account=account_id, actor=ADMIN_ID)

    assert first.items == second.items == []


async def test_remove_only_touches_target(store: RowStore, create_account) -> None:
    keep = await create_account(name="Ivy")
    drop = await create_account(name="Jo")
    service = RoleMutationService(store)
    await service.assign_role(target_account=keep, role=Role.ADMIN, actor=ADMIN_ID)
    await service.assign_role(target_account=drop, role=Role.MODERATOR, actor=ADMIN_ID)

    remaining = await service.remove_role(target_account=drop, actor=ADMIN_ID)

    assert [(a.account_ref, a.role) for a in remaining.items] == [(keep, Role.ADMIN)]


async def test_assign_to_unknown_account(store: RowStore) -> None:
    service = RoleMutationService(store)

    with pytest.raises(UnknownAccountError):
        await service.assign_role(target_account="ghost", role=Role.ADMIN, actor=ADMIN_ID)

    assert await service.list_assignments() == []


async def test_store_failure_is_surfaced_without_refresh() -> None:
    mock_store = AsyncMock(spec=RowStore)
    mock_store.upsert.side_effect = StoreError("write timeout")

    with pytest.raises(RoleMutationError):
        await RoleMutationService(mock_store).assign_role(
            target_account="acc-1", role=Role.MODERATOR, actor=ADMIN_ID
        )

    mock_store.read.assert_not_awaited()


async def test_upsert_is_keyed_on_account() -> None:
    mock_store = AsyncMock(spec=RowStore)
    mock_store.read.return_value = []

    await RoleMutationService(mock_store).assign_role(
        target_account="acc-1", role=Role.MODERATOR, actor=ADMIN_ID
    )

    mock_store.upsert.assert_awaited_once_with(
        "user_roles",
        {"account_ref": "acc-1", "role": "moderator", "assigned_by": ADMIN_ID},
        key=("account_ref",),
    )


async def test_failed_refresh_after_assign_still_reports_success() -> None:
    mock_store = AsyncMock(spec=RowStore)
    mock_store.read.side_effect = StoreError("read replica gone")

    result = await RoleMutationService(mock_store).assign_role(
        target_account="acc-1", role=Role.ADMIN, actor=ADMIN_ID
    )

    assert result.refreshed is False
    assert result.items == []
    mock_store.upsert.assert_awaited_once()


async def test_failed_refresh_after_remove_still_reports_success() -> None:
    mock_store = AsyncMock(spec=RowStore)
    mock_store.delete.return_value = 1
    mock_store.read.side_effect = RuntimeError("pool exhausted")

    result = await RoleMutationService(mock_store).remove_role(
        target_account="acc-1", actor=ADMIN_ID
    )

    assert result.refreshed is False
    mock_store.delete.assert_awaited_once_with("user_roles", {"account_ref": "acc-1"})
