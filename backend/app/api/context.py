"""
GraphQL context: the request's repositories and the resolved caller.

The Authorization header ("JWT <token>") is decoded here, before any
resolver runs. A missing, malformed, expired or orphaned token yields an
anonymous context rather than an error; protected fields reject it later.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.security import AuthenticatedUser, decode_access_token, extract_token
from app.db.session import get_db
from app.repositories import RepositoryManager, get_repository_manager

logger = get_logger(__name__)


async def resolve_user(repos: RepositoryManager, authorization: Optional[str]) -> Optional[AuthenticatedUser]:
    token = extract_token(authorization)
    if token is None:
        return None

    user_id = decode_access_token(token)
    if user_id is None:
        return None

    user = await repos.user.find_by_id(user_id)
    caller = None
    if user is not None:
        # Snapshot before the rollback below expires the instance
        caller = AuthenticatedUser(id=user.id, email=user.email, username=user.username)

    # End the read so the connection goes back to the pool before resolvers run
    await repos.session.rollback()
    if caller is None:
        logger.info("token_user_missing", user_id=user_id)
    return caller


async def get_context(
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    repos = get_repository_manager(db)
    return {
        "repos": repos,
        "user": await resolve_user(repos, authorization),
    }
