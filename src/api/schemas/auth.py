"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field
from src.core.auth import Role

# --- Request Schemas ---


class RegisterRequest(BaseModel):
    """Request schema for account registration."""

    name: str = Field(..., min_length=1, max_length=128, description="Display name")
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Password (min 8 characters)",
    )
    institution: str | None = Field(None, max_length=255, description="School or university")
    phone: str | None = Field(None, max_length=32, description="Contact phone number")


class LoginRequest(BaseModel):
    """Request schema for login."""

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Account password")


# --- Response Schemas ---


class TokenResponse(BaseModel):
    """Response schema containing the JWT access token."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token TTL in seconds")


class AccountResponse(BaseModel):
    """Response schema for account data."""

    id: str = Field(..., description="Account ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Account email")
    institution: str | None = Field(None, description="School or university")
    phone: str | None = Field(None, description="Contact phone number")
    created_at: datetime = Field(..., description="Account creation timestamp")


class RegisterResponse(BaseModel):
    message: str = Field(default="Registration successful")
    account: AccountResponse
    token: TokenResponse


class LoginResponse(BaseModel):
    message: str = Field(default="Login successful")
    account: AccountResponse
    token: TokenResponse


class MeResponse(BaseModel):
    """Current account together with its resolved role."""

    account: AccountResponse
    role: Role
