"""Repository contract for CRUD entities and its SQLAlchemy implementation."""
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import func, inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from restcrud.core.exceptions import DuplicateEntityError
from restcrud.core.paged import Paged

I = TypeVar('I')
# Unbound: pydantic builds a schema for the bound when Paged[E] is evaluated
E = TypeVar('E')

_DUPLICATE_MARKERS = ("duplicate", "unique")


class CRUDRepository(ABC, Generic[I, E]):
    """Store operations the CRUD service relies on.

    Every read ignores soft-deleted entities.
    """

    @abstractmethod
    async def find_page(self, page: int, per_page: int) -> Paged[E]:
        """Find a 0-based page of entities that are not deleted."""

    @abstractmethod
    async def find_by_id(self, id: I) -> Optional[E]:
        """Find entity by ID, None if it doesn't exist or is deleted."""

    @abstractmethod
    async def insert(self, entity: E) -> E:
        """Persist a new entity."""

    @abstractmethod
    async def conditional_update(self, entity: E) -> int:
        """Persist entity only if the stored version still equals ``entity.version``.

        Returns:
            Number of affected rows, 1 on success and 0 otherwise
        """

    async def flush(self) -> None:
        """Push pending writes to the store."""


class SQLAlchemyCRUDRepository(CRUDRepository[I, E]):
    """CRUD repository over an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession, model_class: Type[E]):
        self.session = session
        self.model_class = model_class

    def _live(self):
        return self.model_class.deleted_at.is_(None)

    async def find_page(self, page: int, per_page: int) -> Paged[E]:
        count_stmt = select(func.count()).select_from(self.model_class).where(self._live())
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(self.model_class)
            .where(self._live())
            .order_by(self.model_class.created_at, self.model_class.id)
            .offset(page * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        entities = list(result.scalars().all())
        for entity in entities:
            self.session.expunge(entity)
        return Paged.of(entities, page, per_page, total)

    async def find_by_id(self, id: I) -> Optional[E]:
        stmt = select(self.model_class).where(self.model_class.id == id, self._live())
        result = await self.session.execute(stmt)
        entity = result.scalar_one_or_none()
        if entity is not None:
            # Detached so in-place changes are only written by conditional_update
            self.session.expunge(entity)
        return entity

    async def insert(self, entity: E) -> E:
        self.session.add(entity)
        await self.session.flush()
        self.session.expunge(entity)
        return entity

    async def conditional_update(self, entity: E) -> int:
        values = {
            attr.key: getattr(entity, attr.key)
            for attr in inspect(self.model_class).column_attrs
            if attr.key not in ("id", "version")
        }
        stmt = (
            update(self.model_class)
            .where(
                self.model_class.id == entity.id,
                self.model_class.version == entity.version,
            )
            .values({**values, "version": self.model_class.version + 1})
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def flush(self) -> None:
        await self.session.flush()


def is_duplicate_error(error: BaseException) -> bool:
    """Check whether an error, or anything that caused it, is a uniqueness violation."""
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, DuplicateEntityError):
            return True
        if isinstance(current, IntegrityError):
            return _mentions_duplicate(current.orig if current.orig is not None else current)
        current = current.__cause__
    return False


def _mentions_duplicate(error: Any) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in _DUPLICATE_MARKERS)
