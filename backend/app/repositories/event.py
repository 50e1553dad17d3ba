"""
Event repository: listings with the creator loaded, search and cascade helpers.

Listings are sorted newest first by primary key (insertion order).
"""

from typing import Any, Mapping, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import joinedload

from app.models.event import Event
from app.repositories.base import BaseRepository, Filters

DEFAULT_LIMIT = 8
LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class EventRepository(BaseRepository[Event]):
    model = Event

    async def find_all_with_creator(
        self,
        filters: Filters = None,
        skip: int = 0,
        limit: int = DEFAULT_LIMIT,
    ) -> list[Event]:
        # A non-positive limit means "no limit"
        return await self.find_all(
            filters,
            options=[joinedload(Event.creator)],
            order_by=[Event.id.desc()],
            offset=max(0, skip),
            limit=limit if limit > 0 else None,
        )

    async def find_by_creator(self, creator_id: int) -> list[Event]:
        return await self.find_all(
            {"creator_id": creator_id},
            options=[joinedload(Event.creator)],
        )

    async def search(self, term: str, skip: int = 0, limit: int = DEFAULT_LIMIT) -> list[Event]:
        pattern = f"%{escape_like(term.strip())}%"
        return await self.find_all_with_creator(
            [
                or_(
                    Event.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Event.description.ilike(pattern, escape=LIKE_ESCAPE),
                )
            ],
            skip,
            limit,
        )

    async def title_exists(self, title: str, exclude_id: Optional[int] = None) -> bool:
        filters: list[Any] = [Event.title == title]
        if exclude_id is not None:
            filters.append(Event.id != exclude_id)
        return await self.exists(filters)

    async def find_by_id_with_creator(self, id: int) -> Optional[Event]:
        return await self.find_by_id(id, options=[joinedload(Event.creator)])

    async def update_with_creator(self, id: int, data: Mapping[str, Any]) -> Optional[Event]:
        updated = await self.update(id, data)
        if updated is None:
            return None
        return await self.find_by_id_with_creator(id)

    async def get_event_ids_by_creator(self, creator_id: int) -> list[int]:
        result = await self.session.scalars(
            select(Event.id).where(Event.creator_id == creator_id)
        )
        return list(result.all())
