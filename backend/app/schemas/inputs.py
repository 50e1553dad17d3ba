"""
GraphQL input types. Update inputs leave every field optional.
"""

from typing import Optional

import strawberry


@strawberry.input
class UserInput:
    username: str
    email: str
    password: str


@strawberry.input
class UpdateUserInput:
    username: Optional[str] = strawberry.UNSET
    password: Optional[str] = strawberry.UNSET


@strawberry.input
class EventInput:
    title: str
    description: str
    price: float
    date: str


@strawberry.input
class UpdateEventInput:
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    price: Optional[float] = strawberry.UNSET
    date: Optional[str] = strawberry.UNSET
