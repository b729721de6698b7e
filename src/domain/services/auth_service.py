"""Account sign-up and sign-in with password hashing."""

from __future__ import annotations

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import create_access_token
from src.core.config import get_settings
from src.infrastructure.db.models import AccountModel

logger = structlog.get_logger()

# Password hashing context with bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthError(Exception):
    """Base exception for authentication errors."""


class AccountExistsError(AuthError):
    """Raised when attempting to register with an existing email."""


class InvalidCredentialsError(AuthError):
    """Raised when login credentials are invalid."""


class AccountNotFoundError(AuthError):
    """Raised when the account is not found."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    """Owns the accounts table; everything else only reads it."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register_account(
        self,
        *,
        name: str,
        email: str,
        password: str,
        institution: str | None = None,
        phone: str | None = None,
    ) -> dict:
        """
        Create a new account.

        Returns:
            dict with account data and token
        """
        await logger.ainfo("register_attempt", email=email)

        account = AccountModel(
            name=name,
            email=email.lower(),
            hashed_password=hash_password(password),
            institution=institution,
            phone=phone,
        )

        try:
            self.session.add(account)
            await self.session.commit()
            await self.session.refresh(account)
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=email)
            raise AccountExistsError(f"Account with email {email} already exists") from exc

        await logger.ainfo("register_success", account_id=account.id)

        return {
            "account": self._account_to_dict(account),
            "token": self._generate_token(account),
        }

    async def login(self, *, email: str, password: str) -> dict:
        """Authenticate with email and password."""
        await logger.ainfo("login_attempt", email=email)

        stmt = select(AccountModel).where(AccountModel.email == email.lower())
        result = await self.session.execute(stmt)
        account = result.scalar_one_or_none()

        if account is None or not verify_password(password, account.hashed_password):
            await logger.awarning("login_rejected", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        await logger.ainfo("login_success", account_id=account.id)

        return {
            "account": self._account_to_dict(account),
            "token": self._generate_token(account),
        }

    async def get_account_by_id(self, account_id: str) -> dict:
        stmt = select(AccountModel).where(AccountModel.id == account_id)
        result = await self.session.execute(stmt)
        account = result.scalar_one_or_none()

        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")

        return self._account_to_dict(account)

    async def find_account_id_by_email(self, email: str) -> str:
        account_id = await self.session.scalar(
            select(AccountModel.id).where(AccountModel.email == email.lower())
        )
        if account_id is None:
            raise AccountNotFoundError(f"No account for {email}")
        return account_id

    def _generate_token(self, account: AccountModel) -> dict:
        settings = get_settings()
        return {
            "access_token": create_access_token(account.id, email=account.email),
            "token_type": "bearer",
            "expires_in": settings.access_token_ttl_seconds,
        }

    def _account_to_dict(self, account: AccountModel) -> dict:
        return {
            "id": account.id,
            "name": account.name,
            "email": account.email,
            "institution": account.institution,
            "phone": account.phone,
            "created_at": account.created_at,
        }
