from app.schemas.types import AuthData, Booking, Event, User
from app.schemas.inputs import EventInput, UpdateEventInput, UpdateUserInput, UserInput

__all__ = [
    "AuthData", "Booking", "Event", "User",
    "EventInput", "UpdateEventInput", "UpdateUserInput", "UserInput",
]
