from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from src.api.deps import get_db_session, get_row_store
from src.api.main import app
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import AccountModel, UserRole, UserRoleModel
from src.infrastructure.db.session import build_engine
from src.infrastructure.repositories.row_store import RowStore

from tests.utils import auth_headers

# Accounts created directly in tests never log in with a password
UNUSED_PASSWORD_HASH = "$2b$12$unusedunusedunusedunuseduOTy5n0tArealHashValueForTests00"

CreateAccount = Callable[..., Awaitable[str]]


@pytest.fixture()
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    # File-backed so concurrent sessions see the same database
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'studyhub.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
def store(session_factory: async_sessionmaker[AsyncSession]) -> RowStore:
    return RowStore(session_factory)


@pytest.fixture()
def create_account(session_factory: async_sessionmaker[AsyncSession]) -> CreateAccount:
    """Insert an account (optionally with a role row) and return its id."""

    async def _create(
        name: str = "Test Student",
        email: str | None = None,
        role: UserRole | None = None,
    ) -> str:
        async with session_factory() as session:
            account = AccountModel(
                name=name,
                email=email or f"{name.lower().replace(' ', '.')}@example.edu",
                hashed_password=UNUSED_PASSWORD_HASH,
            )
            session.add(account)
            await session.flush()
            if role is not None:
                session.add(
                    UserRoleModel(account_ref=account.id, role=role, assigned_by="seed")
                )
            await session.commit()
            return account.id

    return _create


@pytest.fixture()
async def async_client(
    store: RowStore, session_factory: async_sessionmaker[AsyncSession]
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the app, bound to the test database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_row_store] = lambda: store

    transport = ASGITransport(app=app)  # type: ignore
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_row_store, None)


@pytest.fixture()
async def admin_headers(create_account: CreateAccount) -> dict[str, str]:
    admin_id = await create_account(name="Site Admin", role=UserRole.ADMIN)
    return auth_headers(admin_id, email="site.admin@example.edu")


@pytest.fixture()
async def moderator_headers(create_account: CreateAccount) -> dict[str, str]:
    moderator_id = await create_account(name="Forum Moderator", role=UserRole.MODERATOR)
    return auth_headers(moderator_id, email="forum.moderator@example.edu")


@pytest.fixture()
async def student_headers(create_account: CreateAccount) -> dict[str, str]:
    student_id = await create_account(name="Plain Student")
    return auth_headers(student_id, email="plain.student@example.edu")
