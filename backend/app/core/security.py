"""
Password hashing and JWT helpers.

Tokens carry the user id in an ``id`` claim, which the client reads back.
Expiry is optional and driven by settings.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

AUTH_SCHEMES = ("jwt", "bearer")


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from the request token, detached from any session."""

    id: int
    email: str
    username: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unknown or corrupted hash format
        logger.warning("password_hash_unreadable")
        return False


async def hash_password_async(password: str) -> str:
    # bcrypt is CPU bound; keep it off the event loop
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    to_encode: dict[str, Any] = {"id": str(user_id)}

    if expires_delta is None and settings.ACCESS_TOKEN_EXPIRE_MINUTES > 0:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    if expires_delta is not None:
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Return the user id carried by a token, or None if it is unusable."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("token_rejected", error=str(e))
        return None

    try:
        return int(payload["id"])
    except (KeyError, TypeError, ValueError):
        logger.info("token_rejected", error="missing id claim")
        return None


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Split an ``Authorization: JWT <token>`` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() not in AUTH_SCHEMES or not token.strip():
        return None
    return token.strip()
