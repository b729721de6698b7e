from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints
from src.domain import Complaint, ComplaintStatus, ContactMessage

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=32)]


class ComplaintCreate(BaseModel):
    email: EmailStr
    phone: Phone
    subject: ShortText
    message: NonBlank


class ComplaintItem(BaseModel):
    id: str
    email: str
    phone: str
    subject: str
    message: str
    status: ComplaintStatus
    created_at: datetime | None = None
    admin_reply: str | None = None
    replied_at: datetime | None = None
    replied_by: str | None = None

    @classmethod
    def from_domain(cls, complaint: Complaint) -> ComplaintItem:
        return cls(
            id=complaint.id,
            email=complaint.email,
            phone=complaint.phone,
            subject=complaint.subject,
            message=complaint.message,
            status=complaint.status,
            created_at=complaint.created_at,
            admin_reply=complaint.admin_reply,
            replied_at=complaint.replied_at,
            replied_by=complaint.replied_by,
        )


class ComplaintsResponse(BaseModel):
    complaints: list[ComplaintItem]
    refreshed: bool = Field(
        True, description="False when the write succeeded but the list could not be re-read"
    )


class ComplaintReplyRequest(BaseModel):
    # Blank and over-long replies are rejected by the service so the draft can be echoed back
    reply: str = Field(..., description="Reply sent to the complainant")


class ContactCreate(BaseModel):
    name: ShortText
    email: EmailStr
    message: NonBlank


class ContactItem(BaseModel):
    id: str
    name: str
    email: str
    message: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, contact: ContactMessage) -> ContactItem:
        return cls(
            id=contact.id,
            name=contact.name,
            email=contact.email,
            message=contact.message,
            created_at=contact.created_at,
        )


class ContactsResponse(BaseModel):
    contacts: list[ContactItem]
