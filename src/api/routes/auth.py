"""Authentication routes - register, login, profile."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, get_session_context
from src.api.schemas.auth import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from src.domain import SessionContext
from src.domain.services.auth_service import (
    AccountExistsError,
    AccountNotFoundError,
    AuthService,
    InvalidCredentialsError,
)

logger = structlog.get_logger()
router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new account",
    description="Create a new account. New accounts hold the default user role.",
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    service = AuthService(session)

    try:
        result = await service.register_account(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            institution=payload.institution,
            phone=payload.phone,
        )
    except AccountExistsError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    return RegisterResponse(
        account=AccountResponse(**result["account"]),
        token=TokenResponse(**result["token"]),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Account login",
    description="Authenticate with email and password, returns a JWT access token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    service = AuthService(session)

    try:
        result = await service.login(email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    return LoginResponse(
        account=AccountResponse(**result["account"]),
        token=TokenResponse(**result["token"]),
    )


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current account",
    description="Get the authenticated account and its effective role.",
)
async def get_me(
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    service = AuthService(session)

    try:
        account = await service.get_account_by_id(context.identity.user_id)
    except AccountNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return MeResponse(account=AccountResponse(**account), role=context.effective_role)
