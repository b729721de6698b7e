from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field
from src.api.schemas.complaints import ComplaintItem
from src.core.auth import Role
from src.domain import AdminOverview, RoleAssignment


class RoleAssignmentItem(BaseModel):
    id: str
    account_ref: str
    role: Role
    assigned_by: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, assignment: RoleAssignment) -> RoleAssignmentItem:
        return cls(
            id=assignment.id,
            account_ref=assignment.account_ref,
            role=assignment.role,
            assigned_by=assignment.assigned_by,
            created_at=assignment.created_at,
        )


class RoleAssignmentsResponse(BaseModel):
    assignments: list[RoleAssignmentItem]
    refreshed: bool = Field(
        True, description="False when the write succeeded but the list could not be re-read"
    )


class RoleUpdateRequest(BaseModel):
    role: Role = Field(..., description="Role to assign to the account")


class AccountItem(BaseModel):
    id: str
    name: str
    email: str
    institution: str | None = None
    phone: str | None = None
    created_at: datetime | None = None
    role: Role


class OverviewStats(BaseModel):
    total_accounts: int
    moderator_count: int
    admin_count: int
    pending_complaints: int


class AdminOverviewResponse(BaseModel):
    accounts: list[AccountItem]
    role_assignments: list[RoleAssignmentItem]
    complaints: list[ComplaintItem]
    stats: OverviewStats
    failed_collections: list[str] = Field(
        default_factory=list,
        description="Collections that could not be loaded; the view is partial when non-empty",
    )

    @classmethod
    def from_domain(cls, overview: AdminOverview) -> AdminOverviewResponse:
        return cls(
            accounts=[
                AccountItem(
                    id=item.account.id,
                    name=item.account.name,
                    email=item.account.email,
                    institution=item.account.institution,
                    phone=item.account.phone,
                    created_at=item.account.created_at,
                    role=item.role,
                )
                for item in overview.accounts
            ],
            role_assignments=[
                RoleAssignmentItem.from_domain(assignment)
                for assignment in overview.role_assignments
            ],
            complaints=[ComplaintItem.from_domain(complaint) for complaint in overview.complaints],
            stats=OverviewStats(
                total_accounts=overview.total_accounts,
                moderator_count=overview.moderator_count,
                admin_count=overview.admin_count,
                pending_complaints=overview.pending_complaints,
            ),
            failed_collections=overview.failed_collections,
        )
