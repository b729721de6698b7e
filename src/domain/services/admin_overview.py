"""Admin dashboard aggregation over accounts, role assignments and complaints."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from src.core.auth import DEFAULT_ROLE, Role
from src.domain.models import (
    Account,
    AccountWithRole,
    AdminOverview,
    Complaint,
    ComplaintStatus,
    RoleAssignment,
)
from src.infrastructure.repositories.row_store import RowStore

logger = structlog.get_logger()

T = TypeVar("T")


class AdminDataAggregator:
    """Loads the three admin collections concurrently and derives the view model."""

    def __init__(self, store: RowStore) -> None:
        self.store = store

    async def load(self) -> AdminOverview:
        failed: list[str] = []

        accounts, assignments, complaints = await asyncio.gather(
            self._load("accounts", Account.from_row, failed),
            self._load("user_roles", RoleAssignment.from_row, failed),
            self._load("complaints", Complaint.from_row, failed),
        )

        overview = build_overview(accounts, assignments, complaints)
        overview.failed_collections = sorted(failed)

        await logger.ainfo(
            "admin_overview_loaded",
            total_accounts=overview.total_accounts,
            pending_complaints=overview.pending_complaints,
            failed_collections=overview.failed_collections,
        )
        return overview

    async def _load(
        self,
        collection: str,
        convert: Callable[[dict[str, Any]], T],
        failed: list[str],
    ) -> list[T]:
        """Read one collection newest-first; a failure leaves it empty."""
        try:
            rows = await self.store.read(collection, order_by="created_at", direction="desc")
            return [convert(row) for row in rows]
        except Exception as exc:
            failed.append(collection)
            await logger.aerror(
                "admin_collection_load_failed", collection=collection, error=str(exc)
            )
            return []


def build_overview(
    accounts: list[Account],
    assignments: list[RoleAssignment],
    complaints: list[Complaint],
) -> AdminOverview:
    """Join accounts with their current role and compute dashboard counters."""
    # Newest-first input; the first row seen for an account wins
    role_by_account: dict[str, Role] = {}
    for assignment in assignments:
        role_by_account.setdefault(assignment.account_ref, assignment.role)

    joined = [
        AccountWithRole(account=account, role=role_by_account.get(account.id, DEFAULT_ROLE))
        for account in accounts
    ]

    return AdminOverview(
        accounts=joined,
        role_assignments=assignments,
        complaints=complaints,
        total_accounts=len(accounts),
        moderator_count=sum(1 for role in role_by_account.values() if role is Role.MODERATOR),
        admin_count=sum(1 for role in role_by_account.values() if role is Role.ADMIN),
        pending_complaints=sum(
            1 for complaint in complaints if complaint.status is ComplaintStatus.PENDING
        ),
    )
