"""
GraphQL output types.
"""

import strawberry


@strawberry.type
class User:
    id: strawberry.ID = strawberry.field(name="_id")
    username: str
    email: str
    password: str


@strawberry.type
class AuthData:
    user_id: strawberry.ID
    token: str
    username: str


@strawberry.type
class Event:
    id: strawberry.ID = strawberry.field(name="_id")
    title: str
    description: str
    price: float
    date: str
    creator: User


@strawberry.type
class Booking:
    id: strawberry.ID = strawberry.field(name="_id")
    event: Event
    user: User
    created_at: str
    updated_at: str
