"""
Repository manager: one entry point per request for all entity repositories.

Repositories are created lazily on first access and cached on the manager,
which is bound to the request's session and passed to resolvers through the
GraphQL context.

Usage:
    repos = get_repository_manager(session)
    async with repos.unit_of_work():
        user = await repos.user.find_by_email("test@example.com")
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.repositories.base import BaseRepository, DuplicateEntityError, Page
from app.repositories.booking import BookingRepository
from app.repositories.event import EventRepository
from app.repositories.user import UserRepository

logger = get_logger(__name__)

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "DuplicateEntityError",
    "EventRepository",
    "Page",
    "RepositoryManager",
    "UserRepository",
    "get_repository_manager",
]


class RepositoryManager:
    def __init__(self, session: AsyncSession):
        self.session = session
        self._user: Optional[UserRepository] = None
        self._event: Optional[EventRepository] = None
        self._booking: Optional[BookingRepository] = None

    @property
    def user(self) -> UserRepository:
        if self._user is None:
            self._user = UserRepository(self.session)
        return self._user

    @property
    def event(self) -> EventRepository:
        if self._event is None:
            self._event = EventRepository(self.session)
        return self._event

    @property
    def booking(self) -> BookingRepository:
        if self._booking is None:
            self._booking = BookingRepository(self.session)
        return self._booking

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator["RepositoryManager"]:
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

    async def health_check(self) -> dict:
        results: dict[str, bool] = {}

        for name, repository in (("user", self.user), ("event", self.event), ("booking", self.booking)):
            try:
                await repository.count()
                results[name] = True
            except Exception as e:
                logger.error("repository_unhealthy", repository=name, error=str(e))
                await self.session.rollback()
                results[name] = False

        return {
            "status": "healthy" if all(results.values()) else "degraded",
            "repositories": results,
        }


def get_repository_manager(session: AsyncSession) -> RepositoryManager:
    return RepositoryManager(session)
