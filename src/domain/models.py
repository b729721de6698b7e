from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from src.core.auth import DEFAULT_ROLE, Role

T = TypeVar("T")


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass(slots=True)
class User:
    """Represents an authenticated identity within the system."""

    user_id: str
    email: str = ""


@dataclass(slots=True)
class RoleAssignment:
    """Current role of one account and who granted it."""

    id: str
    account_ref: str
    role: Role
    assigned_by: str | None
    created_at: datetime | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> RoleAssignment:
        """Build from a ``user_roles`` row; unknown role values raise ValueError."""
        return cls(
            id=row["id"],
            account_ref=row["account_ref"],
            role=Role(row["role"]),
            assigned_by=row.get("assigned_by"),
            created_at=row.get("created_at"),
        )


@dataclass(slots=True)
class SessionContext:
    """Resolved authorization state handed to every gated handler."""

    identity: User
    assignment: RoleAssignment | None = None

    @property
    def effective_role(self) -> Role:
        if self.assignment is None:
            return DEFAULT_ROLE
        return self.assignment.role

    def has_any_role(self, roles: set[Role]) -> bool:
        return self.effective_role in roles


@dataclass(slots=True)
class Account:
    id: str
    name: str
    email: str
    created_at: datetime | None
    institution: str | None = None
    phone: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Account:
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            created_at=row.get("created_at"),
            institution=row.get("institution"),
            phone=row.get("phone"),
        )


@dataclass(slots=True)
class Complaint:
    """Support ticket with a single pending -> resolved transition."""

    id: str
    email: str
    phone: str
    subject: str
    message: str
    status: ComplaintStatus
    created_at: datetime | None
    admin_reply: str | None = None
    replied_at: datetime | None = None
    replied_by: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Complaint:
        return cls(
            id=row["id"],
            email=row["email"],
            phone=row["phone"],
            subject=row["subject"],
            message=row["message"],
            status=ComplaintStatus(row["status"]),
            created_at=row.get("created_at"),
            admin_reply=row.get("admin_reply"),
            replied_at=row.get("replied_at"),
            replied_by=row.get("replied_by"),
        )


@dataclass(slots=True)
class ContactMessage:
    id: str
    name: str
    email: str
    message: str
    created_at: datetime | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ContactMessage:
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            message=row["message"],
            created_at=row.get("created_at"),
        )


@dataclass(slots=True)
class AccountWithRole:
    account: Account
    role: Role


@dataclass(slots=True)
class AdminOverview:
    """View model backing the admin dashboard."""

    accounts: list[AccountWithRole] = field(default_factory=list)
    role_assignments: list[RoleAssignment] = field(default_factory=list)
    complaints: list[Complaint] = field(default_factory=list)
    total_accounts: int = 0
    moderator_count: int = 0
    admin_count: int = 0
    pending_complaints: int = 0
    failed_collections: list[str] = field(default_factory=list)


@dataclass(slots=True)
class RefreshedCollection(Generic[T]):
    """Collection re-read after a committed write.

    ``refreshed`` is False when the write went through but the re-read failed;
    ``items`` is then empty and the client should reload on its own.
    """

    items: list[T] = field(default_factory=list)
    refreshed: bool = True
