"""Domain models for the moderation workflow."""

from src.domain.models import (
    Account,
    AccountWithRole,
    AdminOverview,
    Complaint,
    ComplaintStatus,
    ContactMessage,
    RefreshedCollection,
    RoleAssignment,
    SessionContext,
    User,
)

__all__ = [
    "Account",
    "AccountWithRole",
    "AdminOverview",
    "Complaint",
    "ComplaintStatus",
    "ContactMessage",
    "RefreshedCollection",
    "RoleAssignment",
    "SessionContext",
    "User",
]
