"""Row-oriented access to the named collections backing the moderation workflow.

Every call opens its own session and commits a single statement, so callers can
run several reads concurrently and each write is atomic on its own.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Literal

import structlog
from sqlalchemy import delete, inspect, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import (
    AccountModel,
    ComplaintModel,
    ContactMessageModel,
    UserRoleModel,
)

logger = structlog.get_logger()

Row = dict[str, Any]
Direction = Literal["asc", "desc"]

COLLECTIONS: dict[str, type[Base]] = {
    "accounts": AccountModel,
    "user_roles": UserRoleModel,
    "complaints": ComplaintModel,
    "contacts": ContactMessageModel,
}

# Columns never returned by reads
HIDDEN_COLUMNS: dict[str, frozenset[str]] = {
    "accounts": frozenset({"hashed_password"}),
}

# Columns an upsert must not overwrite on conflict
_INSERT_ONLY_COLUMNS = frozenset({"id", "created_at"})

_DIALECT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class StoreError(Exception):
    """Raised when the store cannot complete an operation."""


class StoreConstraintError(StoreError):
    """Raised when a write violates a uniqueness or foreign key constraint."""


class UnknownCollectionError(StoreError):
    """Raised for a collection name the store does not know about."""


class RowStore:
    """Read/insert/upsert/update/delete keyed by collection name."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def read(
        self,
        collection: str,
        *,
        order_by: str = "created_at",
        direction: Direction = "desc",
        filters: Mapping[str, Any] | None = None,
    ) -> list[Row]:
        """Return all rows of ``collection`` matching ``filters``, ordered."""
        model = _model_for(collection)
        column = _column(model, order_by)
        stmt = select(model).where(*_conditions(model, filters))
        stmt = stmt.order_by(column.desc() if direction == "desc" else column.asc())

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                objects = result.scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"Failed to read {collection}: {exc}") from exc

        return [_to_row(collection, obj) for obj in objects]

    async def insert(self, collection: str, record: Mapping[str, Any]) -> Row:
        """Insert a single row and return it as stored."""
        model = _model_for(collection)
        obj = model(**record)

        async with self._session_factory() as session:
            try:
                session.add(obj)
                await session.commit()
                await session.refresh(obj)
            except IntegrityError as exc:
                await session.rollback()
                raise StoreConstraintError(f"Insert into {collection} rejected") from exc
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise StoreError(f"Failed to insert into {collection}: {exc}") from exc

            return _to_row(collection, obj)

    async def upsert(
        self,
        collection: str,
        record: Mapping[str, Any],
        *,
        key: Sequence[str],
    ) -> None:
        """Insert ``record`` or overwrite the row sharing its ``key`` columns.

        ``id`` and ``created_at`` are only written on first insert.
        """
        model = _model_for(collection)
        for column_name in key:
            _column(model, column_name)

        async with self._session_factory() as session:
            dialect = session.get_bind().dialect.name
            insert_fn = _DIALECT_INSERTS.get(dialect)
            if insert_fn is None:
                raise StoreError(f"Upsert is not supported on {dialect}")

            stmt = insert_fn(model).values(**record)
            overwrite = {
                name: stmt.excluded[name]
                for name in record
                if name not in key and name not in _INSERT_ONLY_COLUMNS
            }
            stmt = stmt.on_conflict_do_update(index_elements=list(key), set_=overwrite)

            try:
                await session.execute(stmt)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise StoreConstraintError(f"Upsert into {collection} rejected") from exc
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise StoreError(f"Failed to upsert into {collection}: {exc}") from exc

    async def update(
        self,
        collection: str,
        filters: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> int:
        """Apply ``patch`` to every matching row in one statement; return rows affected."""
        model = _model_for(collection)
        stmt = update(model).where(*_conditions(model, filters)).values(**patch)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise StoreConstraintError(f"Update of {collection} rejected") from exc
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise StoreError(f"Failed to update {collection}: {exc}") from exc

        return result.rowcount

    async def delete(self, collection: str, filters: Mapping[str, Any]) -> int:
        """Delete matching rows; zero matches is not an error."""
        model = _model_for(collection)
        if not filters:
            raise StoreError(f"Refusing to delete from {collection} without filters")
        stmt = delete(model).where(*_conditions(model, filters))

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                await session.commit()
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise StoreError(f"Failed to delete from {collection}: {exc}") from exc

        if result.rowcount == 0:
            logger.debug("store_delete_no_rows", collection=collection, filters=dict(filters))
        return result.rowcount


def _model_for(collection: str) -> type[Base]:
    try:
        return COLLECTIONS[collection]
    except KeyError as exc:
        raise UnknownCollectionError(f"Unknown collection: {collection}") from exc


def _column(model: type[Base], name: str) -> Any:
    column = model.__table__.columns.get(name)
    if column is None:
        raise StoreError(f"{model.__tablename__} has no column {name!r}")
    return column


def _conditions(model: type[Base], filters: Mapping[str, Any] | None) -> list[Any]:
    if not filters:
        return []
    return [_column(model, name) == value for name, value in filters.items()]


def _to_row(collection: str, obj: Base) -> Row:
    hidden = HIDDEN_COLUMNS.get(collection, frozenset())
    row: Row = {}
    for attr in inspect(obj).mapper.column_attrs:
        if attr.key in hidden:
            continue
        value = getattr(obj, attr.key)
        row[attr.key] = value.value if isinstance(value, enum.Enum) else value
    return row
