"""
Booking repository: per-user listings with event/creator/user loaded,
duplicate checks and bulk cascade deletes.
"""

from typing import Optional

from sqlalchemy import delete, or_
from sqlalchemy.orm import joinedload

from app.models.booking import Booking
from app.models.event import Event
from app.repositories.base import BaseRepository


def _event_with_creator():
    return joinedload(Booking.event).joinedload(Event.creator)


class BookingRepository(BaseRepository[Booking]):
    model = Booking

    async def find_by_user(self, user_id: int) -> list[Booking]:
        return await self.find_all(
            {"user_id": user_id},
            options=[_event_with_creator(), joinedload(Booking.user)],
        )

    async def find_by_id_with_details(self, id: int) -> Optional[Booking]:
        return await self.find_by_id(id, options=[_event_with_creator()])

    async def find_by_id_fully_populated(self, id: int) -> Optional[Booking]:
        return await self.find_by_id(id, options=[_event_with_creator(), joinedload(Booking.user)])

    async def user_has_booked(self, user_id: int, event_id: int) -> bool:
        return await self.exists({"user_id": user_id, "event_id": event_id})

    async def create_and_populate(self, user_id: int, event_id: int) -> Booking:
        booking = await self.create({"user_id": user_id, "event_id": event_id})
        return await self.find_by_id_fully_populated(booking.id)

    async def delete_by_user_cascade(self, user_id: int, event_ids: list[int]) -> int:
        """Delete bookings made by the user or placed on any of their events."""
        condition = Booking.user_id == user_id
        if event_ids:
            condition = or_(condition, Booking.event_id.in_(event_ids))
        result = await self.session.execute(delete(Booking).where(condition))
        return result.rowcount

    async def delete_by_event(self, event_id: int) -> int:
        return await self.delete_where({"event_id": event_id})

    async def count_by_event(self, event_id: int) -> int:
        return await self.count({"event_id": event_id})
