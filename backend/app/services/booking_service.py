"""
Booking service: list, book and cancel.

One booking per (user, event). The existence check is an early exit; the
unique constraint on the bookings table settles concurrent attempts.
Creators are not prevented from booking their own events.
"""

from app.core.errors import BadUserInput, Forbidden, NotFound
from app.core.logging import get_logger
from app.core.metrics import record_booking_attempt
from app.core.security import AuthenticatedUser
from app.repositories import DuplicateEntityError, RepositoryManager
from app.schemas.transform import transform_booking, transform_event
from app.schemas.types import Booking, Event
from app.services import messages
from app.services.pubsub import BOOKING_ADDED, pubsub
from app.services.validators import parse_id

logger = get_logger(__name__)


async def list_bookings(repos: RepositoryManager, caller: AuthenticatedUser) -> list[Booking]:
    rows = await repos.booking.find_by_user(caller.id)
    return [transform_booking(row) for row in rows]


async def book_event(repos: RepositoryManager, caller: AuthenticatedUser, event_id: str) -> Booking:
    pk = parse_id(event_id)

    async with repos.unit_of_work():
        if pk is not None and await repos.booking.user_has_booked(caller.id, pk):
            logger.warning("booking_failed", reason="already_booked", event_id=pk, user_id=caller.id)
            record_booking_attempt("duplicate")
            raise BadUserInput(messages.ALREADY_BOOKED)

        event = await repos.event.find_by_id(pk) if pk is not None else None
        if event is None:
            record_booking_attempt("not_found")
            raise NotFound(messages.EVENT_NOT_FOUND)

        try:
            booking = await repos.booking.create_and_populate(caller.id, event.id)
        except DuplicateEntityError:
            record_booking_attempt("duplicate")
            raise BadUserInput(messages.ALREADY_BOOKED)

        created = transform_booking(booking)

    pubsub.publish(BOOKING_ADDED, created)
    record_booking_attempt("success")
    logger.info("booking_created", booking_id=created.id, event_id=event.id, user_id=caller.id)
    return created


async def cancel_booking(repos: RepositoryManager, caller: AuthenticatedUser, booking_id: str) -> Event:
    """Delete the caller's booking and return the event it was for."""
    pk = parse_id(booking_id)

    async with repos.unit_of_work():
        booking = await repos.booking.find_by_id_with_details(pk) if pk is not None else None
        if booking is None:
            raise NotFound(messages.BOOKING_NOT_FOUND)

        if booking.user_id != caller.id:
            logger.warning("booking_cancel_forbidden", booking_id=booking.id, user_id=caller.id)
            raise Forbidden(messages.BOOKING_CANCEL_FORBIDDEN)

        event = transform_event(booking.event)
        await repos.booking.delete(booking.id)

    logger.info("booking_cancelled", booking_id=pk, event_id=event.id, user_id=caller.id)
    return event
