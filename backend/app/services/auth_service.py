"""
Authentication service: signup, login, profile update and account deletion.

Login reports both "unknown account" and "wrong password" as BAD_USER_INPUT
(with different messages). Account deletion cascades to the user's events and
to every booking made by the user or placed on those events, in one
transaction.
"""

import strawberry

from app.core.errors import BadUserInput, NotFound
from app.core.logging import get_logger
from app.core.metrics import record_auth_attempt
from app.core.security import (
    AuthenticatedUser,
    create_access_token,
    hash_password_async,
    verify_password_async,
)
from app.repositories import DuplicateEntityError, RepositoryManager
from app.schemas.inputs import UpdateUserInput, UserInput
from app.schemas.transform import transform_user
from app.schemas.types import AuthData, User
from app.services import messages
from app.services.cache_service import invalidate_event_cache
from app.services.validators import (
    validate_login_input,
    validate_update_user_input,
    validate_user_input,
)

logger = get_logger(__name__)


async def login(repos: RepositoryManager, email: str, password: str) -> AuthData:
    validate_login_input(email, password)

    user = await repos.user.find_by_email(email)
    if user is None:
        logger.warning("login_failed", reason="unknown_email", email=email)
        record_auth_attempt("login", "unknown_email")
        raise BadUserInput(messages.ACCOUNT_NOT_FOUND)

    if not await verify_password_async(password, user.hashed_password):
        logger.warning("login_failed", reason="wrong_password", user_id=user.id)
        record_auth_attempt("login", "wrong_password")
        raise BadUserInput(messages.WRONG_CREDENTIALS)

    record_auth_attempt("login", "success")
    logger.info("user_logged_in", user_id=user.id)
    return AuthData(
        user_id=strawberry.ID(str(user.id)),
        token=create_access_token(user.id),
        username=user.username,
    )


async def create_user(repos: RepositoryManager, user_input: UserInput) -> AuthData:
    validate_user_input(user_input)
    # Hash outside the transaction so no connection is held during bcrypt
    hashed_password = await hash_password_async(user_input.password)

    async with repos.unit_of_work():
        if await repos.user.email_exists(user_input.email):
            logger.warning("registration_failed", reason="email_exists", email=user_input.email)
            record_auth_attempt("register", "email_exists")
            raise BadUserInput(messages.ACCOUNT_EXISTS)

        try:
            user = await repos.user.create(
                {
                    "username": user_input.username,
                    "email": user_input.email,
                    "hashed_password": hashed_password,
                }
            )
        except DuplicateEntityError:
            # Lost the race against a concurrent signup with the same email
            record_auth_attempt("register", "email_exists")
            raise BadUserInput(messages.ACCOUNT_EXISTS)

    record_auth_attempt("register", "success")
    logger.info("user_registered", user_id=user.id, email=user.email)
    return AuthData(
        user_id=strawberry.ID(str(user.id)),
        token=create_access_token(user.id),
        username=user.username,
    )


async def update_user(
    repos: RepositoryManager,
    caller: AuthenticatedUser,
    update_input: UpdateUserInput,
) -> User:
    """Change username and/or password. Email is not editable."""
    validate_update_user_input(update_input)

    hashed_password = None
    if update_input.password:
        hashed_password = await hash_password_async(update_input.password)

    async with repos.unit_of_work():
        user = await repos.user.find_by_id(caller.id)
        if user is None:
            raise NotFound(messages.USER_NOT_FOUND)

        user = await repos.user.update_profile(
            user.id,
            username=update_input.username or None,
            hashed_password=hashed_password,
        )

    if update_input.username or hashed_password is not None:
        # Cached listings embed the creator profile
        await invalidate_event_cache()

    logger.info(
        "user_updated",
        user_id=user.id,
        username_changed=bool(update_input.username),
        password_changed=hashed_password is not None,
    )
    return transform_user(user)


async def delete_user(repos: RepositoryManager, caller: AuthenticatedUser) -> bool:
    # Bookings first, then events, then the user, so no row ever points at a
    # deleted parent.
    async with repos.unit_of_work():
        event_ids = await repos.event.get_event_ids_by_creator(caller.id)
        bookings_deleted = await repos.booking.delete_by_user_cascade(caller.id, event_ids)
        events_deleted = await repos.event.delete_where({"creator_id": caller.id})
        await repos.user.delete(caller.id)

    await invalidate_event_cache()
    logger.info(
        "user_deleted",
        user_id=caller.id,
        events_deleted=events_deleted,
        bookings_deleted=bookings_deleted,
    )
    return True
