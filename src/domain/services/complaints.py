"""
Complaint triage.

Complaints are submitted ``pending`` and resolved exactly once by a moderator
or admin. The resolution writes status, reply, reply time and responder in a
single conditional update so a half-resolved complaint is never stored.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from src.domain.models import Complaint, ComplaintStatus, RefreshedCollection
from src.infrastructure.repositories.row_store import RowStore, StoreError

logger = structlog.get_logger()

MAX_REPLY_LENGTH = 5000


class ComplaintResolutionError(Exception):
    """Base exception for complaint resolution; keeps the reply draft for retries."""

    def __init__(self, message: str, *, draft: str | None = None) -> None:
        super().__init__(message)
        self.draft = draft


class ReplyValidationError(ComplaintResolutionError):
    """Raised when the reply is blank or too long; no store call has been made."""


class ComplaintNotFoundError(ComplaintResolutionError):
    """Raised when the complaint does not exist."""


class ComplaintAlreadyResolvedError(ComplaintResolutionError):
    """Raised when the complaint has already been resolved."""


class ComplaintStoreError(ComplaintResolutionError):
    """Raised when the store rejected the resolution; the complaint is still pending."""


class ComplaintResolutionService:
    """Moves complaints from pending to resolved."""

    def __init__(self, store: RowStore) -> None:
        self.store = store

    async def resolve(
        self, *, complaint_id: str, reply: str, responder: str
    ) -> RefreshedCollection[Complaint]:
        """
        Resolve ``complaint_id`` with ``reply`` on behalf of ``responder``.

        Returns:
            The complaints collection re-read after the write. A failed re-read
            is reported as ``refreshed=False``; the resolution itself stands.
        """
        body = reply.strip()
        if not body:
            raise ReplyValidationError("Reply must not be empty", draft=reply)
        if len(body) > MAX_REPLY_LENGTH:
            raise ReplyValidationError(
                f"Reply must be at most {MAX_REPLY_LENGTH} characters", draft=reply
            )

        patch = {
            "status": ComplaintStatus.RESOLVED.value,
            "admin_reply": body,
            "replied_at": datetime.now(UTC),
            "replied_by": responder,
        }
        try:
            updated = await self.store.update(
                "complaints",
                {"id": complaint_id, "status": ComplaintStatus.PENDING.value},
                patch,
            )
        except StoreError as exc:
            await logger.aerror(
                "complaint_resolve_failed", complaint_id=complaint_id, error=str(exc)
            )
            raise ComplaintStoreError("Could not save the reply", draft=reply) from exc

        if updated == 0:
            await self._raise_not_pending(complaint_id, reply)

        await logger.ainfo("complaint_resolved", complaint_id=complaint_id, replied_by=responder)
        try:
            complaints = await self.list_complaints()
        except Exception as exc:
            await logger.awarning(
                "complaint_refresh_failed", complaint_id=complaint_id, error=str(exc)
            )
            return RefreshedCollection(refreshed=False)
        return RefreshedCollection(items=complaints)

    async def list_complaints(
        self, *, status: ComplaintStatus | None = None
    ) -> list[Complaint]:
        filters = {"status": status.value} if status is not None else None
        rows = await self.store.read(
            "complaints", order_by="created_at", direction="desc", filters=filters
        )
        return [Complaint.from_row(row) for row in rows]

    async def _raise_not_pending(self, complaint_id: str, reply: str) -> None:
        try:
            rows = await self.store.read("complaints", filters={"id": complaint_id})
        except StoreError as exc:
            raise ComplaintStoreError("Could not save the reply", draft=reply) from exc

        if not rows:
            raise ComplaintNotFoundError(f"Complaint {complaint_id} not found", draft=reply)
        raise ComplaintAlreadyResolvedError(
            f"Complaint {complaint_id} is already resolved", draft=reply
        )
