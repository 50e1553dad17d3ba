"""
End-to-end tests through the /graphql endpoint.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.event import Event
from app.models.user import User
from app.repositories import RepositoryManager
from app.services import messages

from factories import TEST_PASSWORD, make_booking, make_event, make_user

CREATE_USER = """
mutation CreateUser($input: UserInput!) {
  createUser(userInput: $input) { userId token username }
}
"""

LOGIN = """
mutation Login($email: String!, $password: String!) {
  login(email: $email, password: $password) { userId token username }
}
"""

CREATE_EVENT = """
mutation CreateEvent($input: EventInput!) {
  createEvent(eventInput: $input) { _id title price date creator { _id username } }
}
"""

UPDATE_EVENT = """
mutation UpdateEvent($id: ID!, $input: UpdateEventInput!) {
  updateEvent(eventId: $id, eventInput: $input) { _id title price }
}
"""

DELETE_EVENT = """
mutation DeleteEvent($id: ID!) {
  deleteEvent(eventId: $id) { _id title }
}
"""

BOOK_EVENT = """
mutation BookEvent($id: ID!) {
  bookEvent(eventId: $id) { _id createdAt updatedAt event { _id title } user { _id email } }
}
"""

CANCEL_BOOKING = """
mutation CancelBooking($id: ID!) {
  cancelBooking(bookingId: $id) { _id title }
}
"""

BOOKINGS = "query Bookings { bookings { _id event { _id title } } }"

EVENTS = """
query Events($searchTerm: String, $skip: Int, $limit: Int) {
  events(searchTerm: $searchTerm, skip: $skip, limit: $limit) { _id title }
}
"""

USER_EVENTS = """
query UserEvents($userId: ID!) {
  getUserEvents(userId: $userId) { _id title creator { _id } }
}
"""

EVENT_INPUT = {
    "title": "مؤتمر الاختبار",
    "description": "وصف طويل بما يكفي للمناسبة",
    "price": 150,
    "date": "2030-06-01T18:00:00.000Z",
}


def _error_code(body: dict) -> str:
    return body["errors"][0]["extensions"]["code"]


async def _listed_prices(gql) -> dict:
    body = await gql("query Prices { events { _id price } }")
    return {e["_id"]: e["price"] for e in body["data"]["events"]}


async def _register(gql, username: str, email: str) -> dict:
    body = await gql(CREATE_USER, {"input": {"username": username, "email": email, "password": "secret1"}})
    return body["data"]["createUser"]


@pytest.mark.asyncio
async def test_signup_create_book_and_cancel_flow(gql):
    amr = await _register(gql, "amr", "amr@test.com")

    created = await gql(CREATE_EVENT, {"input": EVENT_INPUT}, token=amr["token"])
    event = created["data"]["createEvent"]
    assert event["title"] == "مؤتمر الاختبار"
    assert event["price"] == 150
    assert event["date"] == "2030-06-01 18:00:00.000Z"
    assert event["creator"] == {"_id": amr["userId"], "username": "amr"}

    guest = await _register(gql, "guest", "guest@test.com")

    booked = await gql(BOOK_EVENT, {"id": event["_id"]}, token=guest["token"])
    booking = booked["data"]["bookEvent"]
    assert booking["event"]["_id"] == event["_id"]
    assert booking["user"] == {"_id": guest["userId"], "email": "guest@test.com"}
    assert booking["createdAt"] == booking["updatedAt"]

    listed = await gql(BOOKINGS, token=guest["token"])
    assert len(listed["data"]["bookings"]) == 1
    assert listed["data"]["bookings"][0]["event"]["title"] == "مؤتمر الاختبار"

    cancelled = await gql(CANCEL_BOOKING, {"id": booking["_id"]}, token=guest["token"])
    assert cancelled["data"]["cancelBooking"] == {"_id": event["_id"], "title": "مؤتمر الاختبار"}

    after = await gql(BOOKINGS, token=guest["token"])
    assert after["data"]["bookings"] == []


@pytest.mark.asyncio
async def test_login_returns_token_usable_for_protected_queries(gql, test_user: User):
    body = await gql(LOGIN, {"email": "test@example.com", "password": TEST_PASSWORD})
    auth = body["data"]["login"]
    assert auth["userId"] == str(test_user.id)
    assert auth["username"] == "testuser"

    bookings = await gql(BOOKINGS, token=auth["token"])
    assert bookings["data"]["bookings"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email, password, message",
    [
        ("nobody@example.com", TEST_PASSWORD, messages.ACCOUNT_NOT_FOUND),
        ("test@example.com", "wrong-password", messages.WRONG_CREDENTIALS),
    ],
)
async def test_login_failures(gql, test_user: User, email, password, message):
    body = await gql(LOGIN, {"email": email, "password": password})
    assert body["data"]["login"] is None
    assert body["errors"][0]["message"] == message
    assert _error_code(body) == "BAD_USER_INPUT"


@pytest.mark.asyncio
async def test_validation_errors_are_reported_together(gql):
    body = await gql(
        CREATE_USER,
        {"input": {"username": "ab", "email": "nope", "password": "123"}},
    )
    error = body["errors"][0]
    assert error["extensions"]["code"] == "BAD_USER_INPUT"
    assert error["extensions"]["errors"] == [
        messages.USERNAME_TOO_SHORT,
        messages.EMAIL_INVALID,
        messages.PASSWORD_TOO_SHORT,
    ]
    assert error["message"] == "، ".join(error["extensions"]["errors"])


@pytest.mark.asyncio
async def test_duplicate_signup_is_rejected(gql, test_user: User):
    body = await gql(
        CREATE_USER,
        {"input": {"username": "again", "email": "test@example.com", "password": "secret1"}},
    )
    assert body["errors"][0]["message"] == messages.ACCOUNT_EXISTS
    assert _error_code(body) == "BAD_USER_INPUT"


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "garbage", "eyJhbGciOiJIUzI1NiJ9.e30.invalid"])
async def test_protected_operations_require_authentication(gql, token):
    body = await gql(BOOKINGS, token=token)
    assert body["data"]["bookings"] is None
    assert _error_code(body) == "UNAUTHENTICATED"

    body = await gql(CREATE_EVENT, {"input": EVENT_INPUT}, token=token)
    assert body["data"]["createEvent"] is None
    assert _error_code(body) == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_token_for_deleted_account_is_anonymous(gql, auth_token: str):
    assert (await gql("mutation { deleteUser }", token=auth_token))["data"]["deleteUser"] is True

    body = await gql(BOOKINGS, token=auth_token)
    assert _error_code(body) == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_only_creator_can_update_event(gql, auth_token: str, other_token: str, test_event: Event):
    event_id = str(test_event.id)

    updated = await gql(UPDATE_EVENT, {"id": event_id, "input": {"price": 200}}, token=auth_token)
    assert updated["data"]["updateEvent"] == {"_id": event_id, "title": "Test Concert", "price": 200}
    assert await _listed_prices(gql) == {event_id: 200}

    forbidden = await gql(UPDATE_EVENT, {"id": event_id, "input": {"price": 200}}, token=other_token)
    assert forbidden["data"]["updateEvent"] is None
    assert forbidden["errors"][0]["message"] == messages.EVENT_UPDATE_FORBIDDEN
    assert _error_code(forbidden) == "FORBIDDEN"

    forbidden = await gql(UPDATE_EVENT, {"id": event_id, "input": {"price": 1}}, token=other_token)
    assert _error_code(forbidden) == "FORBIDDEN"
    assert await _listed_prices(gql) == {event_id: 200}


@pytest.mark.asyncio
async def test_update_missing_event_is_not_found(gql, auth_token: str):
    body = await gql(UPDATE_EVENT, {"id": "9999", "input": {"price": 10}}, token=auth_token)
    assert body["errors"][0]["message"] == messages.EVENT_NOT_FOUND
    assert _error_code(body) == "NOT_FOUND"


@pytest.mark.asyncio
async def test_duplicate_booking_is_rejected(gql, other_token: str, test_event: Event):
    event_id = str(test_event.id)
    await gql(BOOK_EVENT, {"id": event_id}, token=other_token)

    body = await gql(BOOK_EVENT, {"id": event_id}, token=other_token)
    assert body["errors"][0]["message"] == messages.ALREADY_BOOKED
    assert _error_code(body) == "BAD_USER_INPUT"


@pytest.mark.asyncio
async def test_cannot_cancel_another_users_booking(
    gql, db_session: AsyncSession, auth_token: str, other_user: User, test_event: Event
):
    booking = await make_booking(db_session, other_user, test_event)

    body = await gql(CANCEL_BOOKING, {"id": str(booking.id)}, token=auth_token)
    assert body["errors"][0]["message"] == messages.BOOKING_CANCEL_FORBIDDEN
    assert _error_code(body) == "FORBIDDEN"


@pytest.mark.asyncio
async def test_delete_event_returns_remaining_events(
    gql, db_session: AsyncSession, auth_token: str, other_token: str, test_user: User, test_event: Event
):
    kept = await make_event(db_session, test_user, "Kept Event")
    event_id, kept_id = str(test_event.id), str(kept.id)

    forbidden = await gql(DELETE_EVENT, {"id": event_id}, token=other_token)
    assert _error_code(forbidden) == "FORBIDDEN"

    body = await gql(DELETE_EVENT, {"id": event_id}, token=auth_token)
    assert body["data"]["deleteEvent"] == [{"_id": kept_id, "title": "Kept Event"}]


@pytest.mark.asyncio
async def test_delete_user_removes_their_events_and_related_bookings(
    gql, db_session: AsyncSession, auth_token: str, other_token: str, test_user: User, other_user: User
):
    first = await make_event(db_session, test_user, "Owned Event One")
    second = await make_event(db_session, test_user, "Owned Event Two")
    foreign = await make_event(db_session, other_user, "Foreign Event")
    await make_booking(db_session, other_user, first)
    await make_booking(db_session, other_user, second)
    await make_booking(db_session, test_user, foreign)
    foreign_id = str(foreign.id)

    body = await gql("mutation { deleteUser }", token=auth_token)
    assert body["data"]["deleteUser"] is True

    events = await gql(EVENTS)
    assert events["data"]["events"] == [{"_id": foreign_id, "title": "Foreign Event"}]

    bookings = await gql(BOOKINGS, token=other_token)
    assert bookings["data"]["bookings"] == []


@pytest.mark.asyncio
async def test_events_pagination_and_search(gql, db_session: AsyncSession, test_user: User):
    for title in ["Event One", "Event Two", "Event Three"]:
        await make_event(db_session, test_user, title)

    first = await gql(EVENTS, {"skip": 0, "limit": 2})
    second = await gql(EVENTS, {"skip": 2, "limit": 2})
    assert [e["title"] for e in first["data"]["events"]] == ["Event Three", "Event Two"]
    assert [e["title"] for e in second["data"]["events"]] == ["Event One"]

    found = await gql(EVENTS, {"searchTerm": "two"})
    assert [e["title"] for e in found["data"]["events"]] == ["Event Two"]

    assert (await gql(EVENTS, {"searchTerm": ".*"}))["data"]["events"] == []


@pytest.mark.asyncio
async def test_repeated_reads_are_identical(gql, test_event: Event):
    first = await gql(EVENTS)
    second = await gql(EVENTS)
    assert first == second
    assert "errors" not in first


@pytest.mark.asyncio
async def test_get_user_events(gql, test_user: User, test_event: Event):
    user_id = str(test_user.id)
    body = await gql(USER_EVENTS, {"userId": user_id})
    assert body["data"]["getUserEvents"] == [
        {"_id": str(test_event.id), "title": "Test Concert", "creator": {"_id": user_id}}
    ]

    assert (await gql(USER_EVENTS, {"userId": "not-an-id"}))["data"]["getUserEvents"] == []


@pytest.mark.asyncio
async def test_update_user_profile(gql, auth_token: str):
    body = await gql(
        "mutation { updateUser(updateUserInput: {username: \"renamed\"}) { _id username email } }",
        token=auth_token,
    )
    assert body["data"]["updateUser"]["username"] == "renamed"
    assert body["data"]["updateUser"]["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "abc123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_metrics_endpoint(gql, client: AsyncClient, test_event: Event):
    await gql("query ListEvents { events { _id } }")
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert 'graphql_operations_total{operation="ListEvents",status="success"}' in response.text


@pytest.mark.asyncio
async def test_account_deletion_removes_owned_events_and_all_their_bookings(
    gql, session_factory, db_session: AsyncSession, auth_token: str, test_user: User, other_user: User
):
    carol = await make_user(db_session, "carol@example.com", "carol")
    dana = await make_user(db_session, "dana@example.com", "dana")
    booked = await make_event(db_session, test_user, "Owned Booked Event")
    await make_event(db_session, test_user, "Owned Quiet Event")
    foreign = await make_event(db_session, carol, "Foreign Event")
    for guest in (other_user, carol, dana):
        await make_booking(db_session, guest, booked)
    survivor = await make_booking(db_session, other_user, foreign)
    owner_id, foreign_id, survivor_id = test_user.id, foreign.id, survivor.id

    async with session_factory() as session:
        users_before = await RepositoryManager(session).user.count()

    body = await gql("mutation { deleteUser }", token=auth_token)
    assert body["data"]["deleteUser"] is True

    async with session_factory() as session:
        repos = RepositoryManager(session)
        assert await repos.user.count() == users_before - 1
        assert await repos.user.find_by_id(owner_id) is None
        assert await repos.event.count({"creator_id": owner_id}) == 0
        assert [e.id for e in await repos.event.find_all()] == [foreign_id]
        assert [b.id for b in await repos.booking.find_all()] == [survivor_id]
