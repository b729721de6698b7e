from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from src.api.deps import get_row_store, require_moderator
from src.api.schemas.complaints import (
    ComplaintCreate,
    ComplaintItem,
    ComplaintReplyRequest,
    ComplaintsResponse,
    ContactCreate,
    ContactItem,
)
from src.domain import ComplaintStatus, SessionContext
from src.domain.services.complaints import (
    ComplaintAlreadyResolvedError,
    ComplaintNotFoundError,
    ComplaintResolutionError,
    ComplaintResolutionService,
    ReplyValidationError,
)
from src.domain.services.intake import IntakeService
from src.infrastructure.repositories.row_store import RowStore, StoreError

router = APIRouter(tags=["Complaints"])


@router.post("/complaints", response_model=ComplaintItem, status_code=status.HTTP_201_CREATED)
async def submit_complaint(
    payload: ComplaintCreate,
    store: RowStore = Depends(get_row_store),
) -> ComplaintItem:
    """File a complaint; it starts out pending."""
    try:
        complaint = await IntakeService(store).submit_complaint(
            email=payload.email,
            phone=payload.phone,
            subject=payload.subject,
            message=payload.message,
        )
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return ComplaintItem.from_domain(complaint)


@router.get("/complaints", response_model=ComplaintsResponse)
async def list_complaints(
    status_filter: ComplaintStatus | None = Query(None, alias="status"),
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_moderator),
) -> ComplaintsResponse:
    """Complaints newest first (moderators and admins)."""
    try:
        complaints = await ComplaintResolutionService(store).list_complaints(status=status_filter)
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return ComplaintsResponse(
        complaints=[ComplaintItem.from_domain(complaint) for complaint in complaints]
    )


@router.post("/complaints/{complaint_id}/resolve", response_model=ComplaintsResponse)
async def resolve_complaint(
    complaint_id: str,
    payload: ComplaintReplyRequest,
    store: RowStore = Depends(get_row_store),
    context: SessionContext = Depends(require_moderator),
) -> ComplaintsResponse:
    """Reply to a pending complaint and mark it resolved. Returns the refreshed complaints."""
    service = ComplaintResolutionService(store)
    try:
        result = await service.resolve(
            complaint_id=complaint_id,
            reply=payload.reply,
            responder=context.identity.user_id,
        )
    except ComplaintResolutionError as exc:
        raise HTTPException(
            status_code=_resolution_status(exc),
            detail={"message": str(exc), "draft": exc.draft},
        ) from exc
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return ComplaintsResponse(
        complaints=[ComplaintItem.from_domain(complaint) for complaint in result.items],
        refreshed=result.refreshed,
    )


@router.post("/contact", response_model=ContactItem, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    payload: ContactCreate,
    store: RowStore = Depends(get_row_store),
) -> ContactItem:
    try:
        contact = await IntakeService(store).submit_contact(
            name=payload.name, email=payload.email, message=payload.message
        )
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return ContactItem.from_domain(contact)


def _resolution_status(exc: ComplaintResolutionError) -> int:
    if isinstance(exc, ReplyValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, ComplaintNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ComplaintAlreadyResolvedError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_503_SERVICE_UNAVAILABLE
