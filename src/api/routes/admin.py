from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from src.api.deps import get_row_store, require_admin
from src.api.schemas.admin import (
    AdminOverviewResponse,
    RoleAssignmentItem,
    RoleAssignmentsResponse,
    RoleUpdateRequest,
)
from src.api.schemas.complaints import ContactItem, ContactsResponse
from src.domain import RoleAssignment, SessionContext
from src.domain.services.admin_overview import AdminDataAggregator
from src.domain.services.intake import IntakeService
from src.domain.services.roles import (
    RoleMutationError,
    RoleMutationService,
    UnknownAccountError,
)
from src.infrastructure.repositories.row_store import RowStore, StoreError

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/overview", response_model=AdminOverviewResponse)
async def get_overview(
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_admin),
) -> AdminOverviewResponse:
    """Accounts with roles, role assignments, complaints and dashboard counters."""
    overview = await AdminDataAggregator(store).load()
    return AdminOverviewResponse.from_domain(overview)


@router.get("/roles", response_model=RoleAssignmentsResponse)
async def list_roles(
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_admin),
) -> RoleAssignmentsResponse:
    try:
        assignments = await RoleMutationService(store).list_assignments()
    except StoreError as exc:
        raise _unavailable(exc) from exc
    return _assignments_response(assignments)


@router.put("/roles/{account_id}", response_model=RoleAssignmentsResponse)
async def assign_role(
    account_id: str,
    payload: RoleUpdateRequest,
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_admin),
) -> RoleAssignmentsResponse:
    """Set the role of an account (admin-only). Returns the refreshed assignments."""
    service = RoleMutationService(store)
    try:
        result = await service.assign_role(
            target_account=account_id,
            role=payload.role,
            actor=context.identity.user_id,
        )
    except UnknownAccountError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except (RoleMutationError, StoreError) as exc:
        raise _unavailable(exc) from exc

    return _assignments_response(result.items, refreshed=result.refreshed)


@router.delete("/roles/{account_id}", response_model=RoleAssignmentsResponse)
async def remove_role(
    account_id: str,
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_admin),
) -> RoleAssignmentsResponse:
    """Drop an account back to the default role (admin-only)."""
    service = RoleMutationService(store)
    try:
        result = await service.remove_role(
            target_account=account_id, actor=context.identity.user_id
        )
    except (RoleMutationError, StoreError) as exc:
        raise _unavailable(exc) from exc

    return _assignments_response(result.items, refreshed=result.refreshed)


@router.get("/contacts", response_model=ContactsResponse)
async def list_contacts(
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_admin),
) -> ContactsResponse:
    try:
        contacts = await IntakeService(store).list_contacts()
    except StoreError as exc:
        raise _unavailable(exc) from exc
    return ContactsResponse(contacts=[ContactItem.from_domain(contact) for contact in contacts])


def _assignments_response(
    assignments: list[RoleAssignment], *, refreshed: bool = True
) -> RoleAssignmentsResponse:
    return RoleAssignmentsResponse(
        assignments=[RoleAssignmentItem.from_domain(assignment) for assignment in assignments],
        refreshed=refreshed,
    )


def _unavailable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
