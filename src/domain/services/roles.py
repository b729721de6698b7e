"""Role assignment and removal for accounts."""

from __future__ import annotations

import structlog
from src.core.auth import Role
from src.domain.models import RefreshedCollection, RoleAssignment
from src.infrastructure.repositories.row_store import (
    RowStore,
    StoreConstraintError,
    StoreError,
)

logger = structlog.get_logger()


class RoleMutationError(Exception):
    """Base exception for role mutations the store rejected."""


class UnknownAccountError(RoleMutationError):
    """Raised when the target account does not exist."""


class RoleMutationService:
    """Writes role assignments and re-reads the collection after each write."""

    def __init__(self, store: RowStore) -> None:
        self.store = store

    async def assign_role(
        self, *, target_account: str, role: Role, actor: str
    ) -> RefreshedCollection[RoleAssignment]:
        """Insert or overwrite the single role row of ``target_account``."""
        record = {
            "account_ref": target_account,
            "role": role.value,
            "assigned_by": actor,
        }
        try:
            await self.store.upsert("user_roles", record, key=("account_ref",))
        except StoreConstraintError as exc:
            await logger.awarning(
                "role_assign_rejected", target_account=target_account, role=role.value
            )
            raise UnknownAccountError(f"Account {target_account} not found") from exc
        except StoreError as exc:
            await logger.aerror(
                "role_assign_failed", target_account=target_account, error=str(exc)
            )
            raise RoleMutationError("Could not save role assignment") from exc

        await logger.ainfo(
            "role_assigned", target_account=target_account, role=role.value, assigned_by=actor
        )
        return await self._refresh()

    async def remove_role(
        self, *, target_account: str, actor: str
    ) -> RefreshedCollection[RoleAssignment]:
        """Delete the role row of ``target_account``; absent rows are fine."""
        try:
            deleted = await self.store.delete("user_roles", {"account_ref": target_account})
        except StoreError as exc:
            await logger.aerror(
                "role_remove_failed", target_account=target_account, error=str(exc)
            )
            raise RoleMutationError("Could not remove role assignment") from exc

        await logger.ainfo(
            "role_removed", target_account=target_account, removed_by=actor, rows=deleted
        )
        return await self._refresh()

    async def list_assignments(self) -> list[RoleAssignment]:
        rows = await self.store.read("user_roles", order_by="created_at", direction="desc")
        return [RoleAssignment.from_row(row) for row in rows]

    async def _refresh(self) -> RefreshedCollection[RoleAssignment]:
        """Re-read after a committed write; a failed re-read does not undo the write."""
        try:
            assignments = await self.list_assignments()
        except Exception as exc:
            await logger.awarning("role_refresh_failed", error=str(exc))
            return RefreshedCollection(refreshed=False)
        return RefreshedCollection(items=assignments)
