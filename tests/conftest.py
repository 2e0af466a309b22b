# tests/conftest.py

from __future__ import annotations

import os

# Must be set before the app (and its settings) are imported
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-that-is-long-enough-123")

from typing import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import Task, User
from app.services.auth_service import TokenSessionResolver

from .fakes import FakeRedis, FakeSessionResolver, make_session

ALICE_TOKEN = "alice-session-token"
BOB_TOKEN = "bob-session-token"


@pytest_asyncio.fixture()
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps the single connection alive, so every session sees
    the same in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def users(session_factory) -> SimpleNamespace:
    """Two accounts: alice and bob."""
    async with session_factory() as db:
        alice = User(email="alice@example.com", name="Alice Doe")
        bob = User(email="bob@example.com", name="Bob Roe")
        db.add_all([alice, bob])
        await db.commit()
    return SimpleNamespace(alice=alice, bob=bob)


@pytest.fixture()
def db_override(session_factory):
    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as db:
            try:
                yield db
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def session_resolver(users) -> FakeSessionResolver:
    return FakeSessionResolver({
        ALICE_TOKEN: make_session(users.alice.id, users.alice.email, users.alice.name),
        BOB_TOKEN: make_session(users.bob.id, users.bob.email, users.bob.name),
    })


def _make_client() -> AsyncClient:
    # Unhandled errors still produce the 500 response instead of raising
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture()
async def client(db_override, session_resolver) -> AsyncGenerator[AsyncClient, None]:
    """API client with two signed-in users available through bearer tokens."""
    original = app.state.session_resolver
    app.state.session_resolver = session_resolver
    async with _make_client() as ac:
        yield ac
    app.state.session_resolver = original


@pytest.fixture()
def fake_redis() -> FakeRedis:
    redis = FakeRedis()
    with patch("app.services.cache.get_redis", AsyncMock(return_value=redis)):
        yield redis


@pytest_asyncio.fixture()
async def auth_client(db_override, fake_redis) -> AsyncGenerator[AsyncClient, None]:
    """API client wired to the real token session resolver."""
    original = app.state.session_resolver
    app.state.session_resolver = TokenSessionResolver()
    async with _make_client() as ac:
        yield ac
    app.state.session_resolver = original


@pytest.fixture()
def alice_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ALICE_TOKEN}"}


@pytest.fixture()
def bob_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {BOB_TOKEN}"}


@pytest_asyncio.fixture()
async def make_task(session_factory):
    """Insert a task directly, bypassing the API."""

    async def _make(owner: User, title: str, **fields) -> Task:
        async with session_factory() as db:
            task = Task(user_id=owner.id, title=title, **fields)
            db.add(task)
            await db.commit()
            await db.refresh(task)
        return task

    return _make
