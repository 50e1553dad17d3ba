"""
Map ORM entities to the GraphQL response shapes.

Event dates are rendered as UTC ISO strings with a space instead of the
"T" separator; booking timestamps as short date strings ("Mon Jan 01 2024").
Naive datetimes (SQLite drops the offset) are read as UTC.
"""

from datetime import datetime, timezone
from typing import Any

import strawberry

from app.models.booking import Booking as BookingModel
from app.models.event import Event as EventModel
from app.models.user import User as UserModel
from app.schemas.types import Booking, Event, User


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_event_date(value: datetime) -> str:
    value = _as_utc(value)
    return value.strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# Fixed English names; strftime %a/%b follow the process locale
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_date_string(value: datetime) -> str:
    value = _as_utc(value)
    return f"{DAY_NAMES[value.weekday()]} {MONTH_NAMES[value.month - 1]} {value.day:02d} {value.year:04d}"


def transform_user(user: UserModel) -> User:
    return User(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        email=user.email,
        password=user.hashed_password,
    )


def transform_event(event: EventModel) -> Event:
    return Event(
        id=strawberry.ID(str(event.id)),
        title=event.title,
        description=event.description,
        price=event.price,
        date=format_event_date(event.date),
        creator=transform_user(event.creator),
    )


def transform_booking(booking: BookingModel) -> Booking:
    return Booking(
        id=strawberry.ID(str(booking.id)),
        event=transform_event(booking.event),
        user=transform_user(booking.user),
        created_at=format_date_string(booking.created_at),
        updated_at=format_date_string(booking.updated_at),
    )


def event_to_dict(event: Event) -> dict[str, Any]:
    return {
        "id": str(event.id),
        "title": event.title,
        "description": event.description,
        "price": event.price,
        "date": event.date,
        "creator": {
            "id": str(event.creator.id),
            "username": event.creator.username,
            "email": event.creator.email,
            "password": event.creator.password,
        },
    }


def event_from_dict(data: dict[str, Any]) -> Event:
    creator = data["creator"]
    return Event(
        id=strawberry.ID(data["id"]),
        title=data["title"],
        description=data["description"],
        price=data["price"],
        date=data["date"],
        creator=User(
            id=strawberry.ID(creator["id"]),
            username=creator["username"],
            email=creator["email"],
            password=creator["password"],
        ),
    )
