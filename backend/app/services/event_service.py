"""
Event service: listings, search, and creator-only update/delete.
"""

from typing import Optional

from app.core.errors import BadUserInput, Forbidden, NotFound
from app.core.logging import get_logger
from app.core.security import AuthenticatedUser
from app.models.event import Event as EventModel
from app.repositories import DuplicateEntityError, RepositoryManager
from app.repositories.event import DEFAULT_LIMIT
from app.schemas.inputs import EventInput, UpdateEventInput
from app.schemas.transform import event_from_dict, event_to_dict, transform_event
from app.schemas.types import Event
from app.services import messages
from app.services.cache_service import get_cached_events, invalidate_event_cache, set_cached_events
from app.services.pubsub import EVENT_ADDED, pubsub
from app.services.validators import (
    parse_event_date,
    parse_id,
    validate_event_input,
    validate_update_event_input,
)

logger = get_logger(__name__)


async def list_events(
    repos: RepositoryManager,
    search_term: Optional[str] = None,
    skip: int = 0,
    limit: int = DEFAULT_LIMIT,
) -> list[Event]:
    """
    Newest events first. A non-blank search term filters on title or
    description. Unlike find_paginated, limit is not capped here.
    """
    cached = await get_cached_events(search_term, skip, limit)
    if cached is not None:
        return [event_from_dict(item) for item in cached]

    if search_term and search_term.strip():
        rows = await repos.event.search(search_term, skip, limit)
    else:
        rows = await repos.event.find_all_with_creator(skip=skip, limit=limit)

    events = [transform_event(row) for row in rows]
    await set_cached_events(search_term, skip, limit, [event_to_dict(e) for e in events])
    return events


async def get_user_events(repos: RepositoryManager, user_id: str) -> list[Event]:
    creator_id = parse_id(user_id)
    if creator_id is None:
        return []
    rows = await repos.event.find_by_creator(creator_id)
    return [transform_event(row) for row in rows]


async def _get_owned_event(
    repos: RepositoryManager,
    caller: AuthenticatedUser,
    event_id: str,
    forbidden_message: str,
) -> EventModel:
    pk = parse_id(event_id)
    event = await repos.event.find_by_id(pk) if pk is not None else None
    if event is None:
        raise NotFound(messages.EVENT_NOT_FOUND)
    if event.creator_id != caller.id:
        logger.warning("event_access_forbidden", event_id=event.id, user_id=caller.id)
        raise Forbidden(forbidden_message)
    return event


async def create_event(
    repos: RepositoryManager,
    caller: AuthenticatedUser,
    event_input: EventInput,
) -> Event:
    validate_event_input(event_input)
    # Length rules apply to the trimmed title, so that is what gets stored
    title = event_input.title.strip()

    async with repos.unit_of_work():
        if await repos.event.title_exists(title):
            logger.warning("event_create_failed", reason="duplicate_title", title=title)
            raise BadUserInput(messages.DUPLICATE_TITLE)

        try:
            event = await repos.event.create(
                {
                    "title": title,
                    "description": event_input.description,
                    "price": event_input.price,
                    "date": parse_event_date(event_input.date),
                    "creator_id": caller.id,
                }
            )
        except DuplicateEntityError:
            raise BadUserInput(messages.DUPLICATE_TITLE)

        created = transform_event(await repos.event.find_by_id_with_creator(event.id))

    await invalidate_event_cache()
    pubsub.publish(EVENT_ADDED, created)
    logger.info("event_created", event_id=created.id, creator_id=caller.id, title=created.title)
    return created


async def update_event(
    repos: RepositoryManager,
    caller: AuthenticatedUser,
    event_id: str,
    event_input: UpdateEventInput,
) -> Event:
    """Apply only the provided fields. Only the creator may update."""
    validate_update_event_input(event_input)

    async with repos.unit_of_work():
        event = await _get_owned_event(repos, caller, event_id, messages.EVENT_UPDATE_FORBIDDEN)

        updates = {}
        if event_input.title:
            updates["title"] = event_input.title.strip()
        if event_input.description:
            updates["description"] = event_input.description
        if event_input.price:
            updates["price"] = event_input.price
        if event_input.date:
            updates["date"] = parse_event_date(event_input.date)

        if "title" in updates and await repos.event.title_exists(updates["title"], exclude_id=event.id):
            raise BadUserInput(messages.DUPLICATE_TITLE)

        try:
            updated = await repos.event.update_with_creator(event.id, updates)
        except DuplicateEntityError:
            raise BadUserInput(messages.DUPLICATE_TITLE)

    await invalidate_event_cache()
    logger.info("event_updated", event_id=updated.id, fields=sorted(updates))
    return transform_event(updated)


async def delete_event(repos: RepositoryManager, caller: AuthenticatedUser, event_id: str) -> list[Event]:
    """Delete the event and its bookings, then return the first page of events."""
    async with repos.unit_of_work():
        event = await _get_owned_event(repos, caller, event_id, messages.EVENT_DELETE_FORBIDDEN)
        bookings_deleted = await repos.booking.delete_by_event(event.id)
        await repos.event.delete(event.id)

    await invalidate_event_cache()
    logger.info("event_deleted", event_id=event.id, bookings_deleted=bookings_deleted)

    rows = await repos.event.find_all_with_creator()
    return [transform_event(row) for row in rows]
