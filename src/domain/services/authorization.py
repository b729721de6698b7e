"""Resolve the effective role of an authenticated identity."""

from __future__ import annotations

import structlog
from src.domain.models import RoleAssignment, SessionContext, User
from src.infrastructure.repositories.row_store import RowStore

logger = structlog.get_logger()


class AuthorizationResolver:
    """Looks up the role assignment for an identity, failing closed to ``user``."""

    def __init__(self, store: RowStore) -> None:
        self.store = store

    async def resolve(self, identity: User) -> SessionContext:
        """
        Build the session context for ``identity``.

        A missing row, a failed lookup and an unrecognised role value all
        resolve to no assignment, i.e. the default role.
        """
        try:
            rows = await self.store.read(
                "user_roles",
                filters={"account_ref": identity.user_id},
            )
        except Exception as exc:
            await logger.awarning(
                "role_lookup_failed", user_id=identity.user_id, error=str(exc)
            )
            return SessionContext(identity=identity)

        if not rows:
            return SessionContext(identity=identity)

        try:
            assignment = RoleAssignment.from_row(rows[0])
        except (KeyError, ValueError) as exc:
            await logger.awarning(
                "role_lookup_invalid_row", user_id=identity.user_id, error=str(exc)
            )
            return SessionContext(identity=identity)

        return SessionContext(identity=identity, assignment=assignment)
