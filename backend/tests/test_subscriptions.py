"""
Tests for the eventAdded / bookingAdded subscription resolvers.
"""

import asyncio

import pytest

from app.api.schema import schema
from app.models.event import Event
from app.models.user import User
from app.repositories import RepositoryManager
from app.schemas.inputs import EventInput
from app.services import booking_service, event_service
from app.services.pubsub import BOOKING_ADDED, EVENT_ADDED, pubsub

from factories import as_caller


async def _next_result(subscription, topic: str) -> asyncio.Task:
    """Start waiting for the next result once the resolver is listening."""
    listening = pubsub.subscriber_count(topic)
    task = asyncio.create_task(subscription.__anext__())
    for _ in range(100):
        if pubsub.subscriber_count(topic) > listening:
            break
        await asyncio.sleep(0.01)
    assert pubsub.subscriber_count(topic) == listening + 1
    return task


@pytest.mark.asyncio
async def test_event_added_streams_created_events(repos: RepositoryManager, test_user: User):
    caller = as_caller(test_user)
    subscription = await schema.subscribe(
        "subscription { eventAdded { _id title price creator { _id username } } }"
    )
    try:
        pending = await _next_result(subscription, EVENT_ADDED)

        created = await event_service.create_event(
            repos,
            caller,
            EventInput(
                title="مؤتمر الاختبار",
                description="وصف طويل بما يكفي للمناسبة",
                price=150.0,
                date="2030-06-01T18:00:00.000Z",
            ),
        )
        result = await asyncio.wait_for(pending, timeout=2)
    finally:
        await subscription.aclose()

    assert result.errors is None
    assert result.data["eventAdded"] == {
        "_id": created.id,
        "title": "مؤتمر الاختبار",
        "price": 150.0,
        "creator": {"_id": str(caller.id), "username": "testuser"},
    }


@pytest.mark.asyncio
async def test_booking_added_streams_new_bookings(repos: RepositoryManager, other_user: User, test_event: Event):
    caller = as_caller(other_user)
    event_id = str(test_event.id)
    subscription = await schema.subscribe(
        "subscription { bookingAdded { _id event { _id title } user { email } } }"
    )
    try:
        pending = await _next_result(subscription, BOOKING_ADDED)
        booking = await booking_service.book_event(repos, caller, event_id)
        result = await asyncio.wait_for(pending, timeout=2)
    finally:
        await subscription.aclose()

    assert result.errors is None
    assert result.data["bookingAdded"] == {
        "_id": booking.id,
        "event": {"_id": event_id, "title": "Test Concert"},
        "user": {"email": "other@example.com"},
    }
