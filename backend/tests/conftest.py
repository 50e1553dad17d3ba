"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite database file, created from the models and
discarded with the test's tmp_path. Fixtures commit their rows so that
request sessions opened by the app see them.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator, Optional

import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.security import create_access_token
from app.models.user import User
from app.models.event import Event
from app.repositories import RepositoryManager
from app.services import cache_service

from factories import make_event, make_user


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def repos(db_session: AsyncSession) -> RepositoryManager:
    return RepositoryManager(db_session)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def gql(client: AsyncClient):
    """POST a GraphQL document, optionally as a user, and return the JSON body."""

    async def execute(query: str, variables: Optional[dict] = None, token: Optional[str] = None) -> dict:
        headers = {"Authorization": f"JWT {token}"} if token else {}
        response = await client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
            headers=headers,
        )
        return response.json()

    return execute


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "test@example.com", "testuser")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "other@example.com", "otheruser")


@pytest_asyncio.fixture
async def auth_token(test_user: User) -> str:
    return create_access_token(test_user.id)


@pytest_asyncio.fixture
async def other_token(other_user: User) -> str:
    return create_access_token(other_user.id)


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, test_user: User) -> Event:
    return await make_event(db_session, test_user, "Test Concert", price=150.0)


@pytest_asyncio.fixture
async def fake_redis(monkeypatch):
    """Turn the listing cache on, backed by an isolated in-memory redis."""
    redis_client = FakeAsyncRedis(server=FakeServer(), decode_responses=True)

    async def get_fake_redis():
        return redis_client

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)
    yield redis_client
    await redis_client.aclose()
