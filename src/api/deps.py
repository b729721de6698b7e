from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Sequence

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import Role, TokenError, create_access_token, decode_access_token
from src.domain import SessionContext, User
from src.domain.services.authorization import AuthorizationResolver
from src.infrastructure.db.session import get_session, get_session_factory
from src.infrastructure.repositories.row_store import RowStore

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated identity from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    return User(user_id=payload["sub"], email=payload.get("email", ""))


def get_row_store() -> RowStore:
    """Provide the row store bound to the application's session factory."""
    return RowStore(get_session_factory())


async def get_session_context(
    user: User = Depends(get_current_user),  # noqa: B008
    store: RowStore = Depends(get_row_store),  # noqa: B008
) -> SessionContext:
    """Resolve the caller's role once for this request."""
    return await AuthorizationResolver(store).resolve(user)


def require_roles(required_roles: Sequence[Role]) -> Callable[..., SessionContext]:
    """Dependency factory enforcing the caller's effective role is in ``required_roles``."""
    if not required_roles:
        raise ValueError("At least one role is required")

    required = set(required_roles)

    def dependency(
        context: SessionContext = Depends(get_session_context),  # noqa: B008
    ) -> SessionContext:
        if not context.has_any_role(required):
            raise _forbidden("Insufficient role privileges")
        return context

    return dependency


require_admin = require_roles([Role.ADMIN])
require_moderator = require_roles([Role.MODERATOR, Role.ADMIN])


def issue_smoke_token(user_id: str, *, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, email=email)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
