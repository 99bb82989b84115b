"""Generic async repository over SQLAlchemy mapped classes.

Repositories never commit: they add, flush and query inside the caller's
session so that a service call is a single transaction.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Optional, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_management.core.exceptions import ConflictError, PersistenceError
from library_management.core.logging import get_logger
from library_management.database import Base

logger = get_logger("repositories")

ModelT = TypeVar("ModelT", bound=Base)


def is_transient(exc: SQLAlchemyError) -> bool:
    """Connection-level failures that a caller may retry."""
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@asynccontextmanager
async def translate_errors(
    db: AsyncSession,
    conflict_reason: str = "Conflicting change rejected by the database",
) -> AsyncIterator[None]:
    """Roll back and re-raise storage exceptions as application errors."""
    try:
        yield
    except IntegrityError as exc:
        await db.rollback()
        logger.warning(f"Integrity violation: {exc.orig}")
        raise ConflictError(conflict_reason) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        transient = is_transient(exc)
        logger.error(f"Storage failure (transient={transient}): {exc}")
        raise PersistenceError(str(exc), transient=transient) from exc


class Repository(Generic[ModelT]):
    """CRUD and filtered reads for one mapped class."""

    def __init__(self, db: AsyncSession, model: type[ModelT]):
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: int, *options: Any) -> Optional[ModelT]:
        """Get an entity by primary key, re-reading persisted state."""
        result = await self.db.execute(
            select(self.model)
            .options(*options)
            .where(self.model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, entity_id: int, *options: Any) -> Optional[ModelT]:
        """Get an entity and hold a row lock until the transaction ends."""
        result = await self.db.execute(
            select(self.model)
            .options(*options)
            .where(self.model.id == entity_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists(self, entity_id: int) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(self.model.id == entity_id)
        )
        return result.scalar_one_or_none() is not None

    async def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self.db.flush()
        return entity

    async def update(self, entity: ModelT) -> ModelT:
        await self.db.flush()
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def list_all(self) -> list[ModelT]:
        result = await self.db.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def list_including(self, *relationships: Any) -> list[ModelT]:
        """List entities with the given relationships eagerly loaded."""
        query = select(self.model).order_by(self.model.id)
        for relationship in relationships:
            query = query.options(selectinload(relationship))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_filtered(self, *criteria: Any, order_by: Sequence[Any] = ()) -> list[ModelT]:
        """List entities matching all ``criteria`` (SQL expressions)."""
        query = select(self.model).where(*criteria)
        query = query.order_by(*order_by) if order_by else query.order_by(self.model.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())
