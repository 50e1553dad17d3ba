"""
GraphQL schema: queries, mutations and subscriptions.

Resolvers here only unpack arguments and context; business rules live in
app.services. Protected fields declare IsAuthenticated.
"""

from typing import AsyncGenerator, Optional

import strawberry
from strawberry.types import Info

from app.api.extensions import OperationLogging
from app.api.guards import IsAuthenticated, current_user
from app.repositories import RepositoryManager
from app.repositories.event import DEFAULT_LIMIT
from app.schemas.inputs import EventInput, UpdateEventInput, UpdateUserInput, UserInput
from app.schemas.types import AuthData, Booking, Event, User
from app.services import auth_service, booking_service, event_service
from app.services.pubsub import BOOKING_ADDED, EVENT_ADDED, pubsub


def _repos(info: Info) -> RepositoryManager:
    return info.context["repos"]


@strawberry.type
class Query:
    @strawberry.field
    async def events(
        self,
        info: Info,
        search_term: Optional[str] = None,
        skip: Optional[int] = 0,
        limit: Optional[int] = DEFAULT_LIMIT,
    ) -> Optional[list[Event]]:
        return await event_service.list_events(
            _repos(info),
            search_term=search_term,
            skip=skip if skip is not None else 0,
            limit=limit if limit is not None else DEFAULT_LIMIT,
        )

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def bookings(self, info: Info) -> Optional[list[Booking]]:
        return await booking_service.list_bookings(_repos(info), current_user(info))

    @strawberry.field
    async def get_user_events(self, info: Info, user_id: strawberry.ID) -> Optional[list[Optional[Event]]]:
        return await event_service.get_user_events(_repos(info), user_id)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(self, info: Info, user_input: UserInput) -> Optional[AuthData]:
        return await auth_service.create_user(_repos(info), user_input)

    @strawberry.mutation
    async def login(self, info: Info, email: str, password: str) -> Optional[AuthData]:
        return await auth_service.login(_repos(info), email, password)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def update_user(self, info: Info, update_user_input: UpdateUserInput) -> Optional[User]:
        return await auth_service.update_user(_repos(info), current_user(info), update_user_input)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def delete_user(self, info: Info) -> Optional[bool]:
        return await auth_service.delete_user(_repos(info), current_user(info))

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def create_event(self, info: Info, event_input: EventInput) -> Optional[Event]:
        return await event_service.create_event(_repos(info), current_user(info), event_input)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def update_event(
        self,
        info: Info,
        event_id: strawberry.ID,
        event_input: UpdateEventInput,
    ) -> Optional[Event]:
        return await event_service.update_event(_repos(info), current_user(info), event_id, event_input)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def book_event(self, info: Info, event_id: strawberry.ID) -> Optional[Booking]:
        return await booking_service.book_event(_repos(info), current_user(info), event_id)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def cancel_booking(self, info: Info, booking_id: strawberry.ID) -> Optional[Event]:
        return await booking_service.cancel_booking(_repos(info), current_user(info), booking_id)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def delete_event(self, info: Info, event_id: strawberry.ID) -> Optional[list[Optional[Event]]]:
        return await event_service.delete_event(_repos(info), current_user(info), event_id)


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def event_added(self) -> AsyncGenerator[Event, None]:
        with pubsub.subscribe(EVENT_ADDED) as subscription:
            async for event in subscription:
                yield event

    @strawberry.subscription
    async def booking_added(self) -> AsyncGenerator[Booking, None]:
        with pubsub.subscribe(BOOKING_ADDED) as subscription:
            async for booking in subscription:
                yield booking


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    extensions=[OperationLogging],
)
