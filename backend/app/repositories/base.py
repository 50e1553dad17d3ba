"""
Generic async repository over a SQLAlchemy model.

Filters are either a mapping of column name to value (a list/tuple/set value
becomes an IN clause) or a sequence of SQLAlchemy boolean expressions.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, TypeVar, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.db.base import Base

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
Filters = Union[Mapping[str, Any], Sequence[Any], None]

MAX_PAGE_SIZE = 50


class DuplicateEntityError(Exception):
    """A write hit a unique constraint."""


@dataclass
class Page(Generic[ModelT]):
    rows: list[ModelT] = field(default_factory=list)
    count: int = 0
    page: int = 1
    total_pages: int = 0


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, session: AsyncSession, model: Optional[type[ModelT]] = None):
        self.session = session
        if model is not None:
            self.model = model

    def _clauses(self, filters: Filters) -> list[Any]:
        if not filters:
            return []
        if isinstance(filters, Mapping):
            clauses = []
            for name, value in filters.items():
                column = getattr(self.model, name)
                if isinstance(value, (list, tuple, set, frozenset)):
                    clauses.append(column.in_(list(value)))
                else:
                    clauses.append(column == value)
            return clauses
        return list(filters)

    async def find_all(
        self,
        filters: Filters = None,
        *,
        options: Iterable[Any] = (),
        order_by: Iterable[Any] = (),
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        query = select(self.model).where(*self._clauses(filters)).options(*options)
        query = query.order_by(*order_by) if order_by else query.order_by(self.model.id)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().unique().all())

    async def find_one(self, filters: Filters, *, options: Iterable[Any] = ()) -> Optional[ModelT]:
        query = select(self.model).where(*self._clauses(filters)).options(*options).limit(1)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def find_by_id(self, id: int, *, options: Iterable[Any] = ()) -> Optional[ModelT]:
        query = (
            select(self.model)
            .where(self.model.id == id)
            .options(*options)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalars().unique().one_or_none()

    async def find_paginated(self, page: int = 1, limit: int = 10, filters: Filters = None) -> Page[ModelT]:
        safe_page = max(1, page)
        safe_limit = min(max(1, limit), MAX_PAGE_SIZE)

        count = await self.count(filters)
        rows = await self.find_all(filters, offset=(safe_page - 1) * safe_limit, limit=safe_limit)

        return Page(
            rows=rows,
            count=count,
            page=safe_page,
            total_pages=math.ceil(count / safe_limit),
        )

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        entity = self.model(**data)
        self.session.add(entity)
        await self._flush()
        return entity

    async def update(self, id: int, data: Mapping[str, Any]) -> Optional[ModelT]:
        entity = await self.find_by_id(id)
        if entity is None:
            return None
        for name, value in data.items():
            setattr(entity, name, value)
        await self._flush()
        return entity

    async def update_where(self, filters: Filters, data: Mapping[str, Any]) -> int:
        result = await self.session.execute(
            update(self.model).where(*self._clauses(filters)).values(**data)
        )
        return result.rowcount

    async def delete(self, id: int) -> Optional[ModelT]:
        entity = await self.find_by_id(id)
        if entity is None:
            return None
        await self.session.delete(entity)
        await self.session.flush()
        return entity

    async def delete_where(self, filters: Filters) -> int:
        result = await self.session.execute(
            delete(self.model).where(*self._clauses(filters))
        )
        return result.rowcount

    async def exists(self, filters: Filters) -> bool:
        query = select(self.model.id).where(*self._clauses(filters)).limit(1)
        return (await self.session.scalar(query)) is not None

    async def count(self, filters: Filters = None) -> int:
        query = select(func.count()).select_from(self.model).where(*self._clauses(filters))
        return (await self.session.scalar(query)) or 0

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("unique_constraint_violation", table=self.model.__tablename__, error=str(e.orig))
            raise DuplicateEntityError(str(e.orig)) from e
