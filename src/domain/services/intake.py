"""Public submission of complaints and contact messages."""

from __future__ import annotations

import structlog
from src.domain.models import Complaint, ComplaintStatus, ContactMessage
from src.infrastructure.repositories.row_store import RowStore

logger = structlog.get_logger()


class IntakeService:
    """Creates pending complaints and append-only contact messages."""

    def __init__(self, store: RowStore) -> None:
        self.store = store

    async def submit_complaint(
        self, *, email: str, phone: str, subject: str, message: str
    ) -> Complaint:
        row = await self.store.insert(
            "complaints",
            {
                "email": email,
                "phone": phone,
                "subject": subject,
                "message": message,
                "status": ComplaintStatus.PENDING.value,
            },
        )
        await logger.ainfo("complaint_submitted", complaint_id=row["id"])
        return Complaint.from_row(row)

    async def submit_contact(self, *, name: str, email: str, message: str) -> ContactMessage:
        row = await self.store.insert(
            "contacts", {"name": name, "email": email, "message": message}
        )
        await logger.ainfo("contact_message_submitted", contact_id=row["id"])
        return ContactMessage.from_row(row)

    async def list_contacts(self) -> list[ContactMessage]:
        rows = await self.store.read("contacts", order_by="created_at", direction="desc")
        return [ContactMessage.from_row(row) for row in rows]
