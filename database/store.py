"""
Document store: create / find / save records through short-lived sessions.

Every operation opens its own ``AsyncSession`` and commits on exit, so
independent operations may run concurrently (``asyncio.gather``) without
sharing a session.  Returned entities are detached but fully loaded
(``expire_on_commit=False``); pass them back to ``save`` after mutating.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from core.errors import StoreError
from database.models import Base

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)


def _is_unique_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed"; PostgreSQL: "... violates unique constraint"
    return "unique" in str(exc.orig).lower()


class DocumentStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                logger.warning("Store constraint violation: %s", exc.orig)
                message = (
                    "A record with these values already exists"
                    if _is_unique_violation(exc)
                    else "The record violates a store constraint"
                )
                raise StoreError(message, http_status=422) from exc
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("Store operation failed: %s", exc)
                raise StoreError() from exc

    # ── writes ──────────────────────────────────────────────────────────

    async def create(self, model: Type[M], **fields: Any) -> M:
        entity = model(**fields)
        async with self._transaction() as session:
            session.add(entity)
            await session.flush()
        logger.debug("Created %s %s", model.__name__, entity.id)
        return entity

    async def save(self, entity: M) -> M:
        async with self._transaction() as session:
            session.add(entity)
        return entity

    async def save_many(self, *entities: Base) -> None:
        """Persist several entities in one transaction (all or nothing)."""
        async with self._transaction() as session:
            session.add_all(entities)

    async def delete(self, model: Type[M], entity_id: uuid.UUID) -> None:
        async with self._transaction() as session:
            await session.execute(delete(model).where(model.id == entity_id))
        logger.debug("Deleted %s %s", model.__name__, entity_id)

    # ── reads ───────────────────────────────────────────────────────────

    async def find_by_id(self, model: Type[M], entity_id: uuid.UUID) -> Optional[M]:
        async with self._transaction() as session:
            return await session.get(model, entity_id)

    async def find_one(
        self,
        model: Type[M],
        *,
        populate: Sequence[str] = (),
        **criteria: Any,
    ) -> Optional[M]:
        """First record matching ``criteria``, eagerly loading ``populate`` relations."""
        stmt = select(model).filter_by(**criteria).limit(1)
        for name in populate:
            stmt = stmt.options(selectinload(getattr(model, name)))
        async with self._transaction() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def find_all(self, model: Type[M]) -> List[M]:
        async with self._transaction() as session:
            result = await session.execute(select(model).order_by(model.created_at))
            return list(result.scalars().all())

    async def count(self, model: Type[M]) -> int:
        async with self._transaction() as session:
            return await session.scalar(select(func.count()).select_from(model))
