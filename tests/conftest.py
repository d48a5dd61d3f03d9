"""
Test fixtures for the dispobank test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - client: Async HTTP test client (unauthenticated)
  - user / other_user: Persisted users for service-level tests
  - make_account: Factory that persists an account with a chosen balance
  - user_auth / second_user_auth: Users registered and logged in over HTTP
  - admin_auth: An administrator provisioned out of band, logged in over HTTP

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) is used for speed and isolation.
    Each test gets a completely fresh database.
  - The engine is built with dispobank.database.create_engine so that
    foreign keys (and ON DELETE SET NULL) behave as in production.
  - We override FastAPI's get_db dependency to inject our test sessions.
  - Service failures roll back the session, which expires every object it
    holds. Fixture objects are therefore detached right after they are
    persisted, and tests read current state with
    session.get(..., populate_existing=True).
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import uuid
from datetime import date
from typing import NamedTuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dispobank.database import Base, create_engine, get_db
from dispobank.main import app
from dispobank.models.account import Account
from dispobank.models.user import User
from dispobank.security import hash_password
from dispobank.services import auth_service


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"

PASSWORD = "SecurePassword123!"
SECOND_PASSWORD = "OtherPassword456?"
ADMIN_PASSWORD = "AdminPassword789$"


class AuthenticatedPrincipal(NamedTuple):
    id: str
    headers: dict


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    Async HTTP test client with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Service-level fixtures (direct database access)
# ---------------------------------------------------------------------------

async def _persist_user(db: AsyncSession, first_name: str, password: str) -> User:
    user = User(
        id=uuid.uuid4(),
        first_name=first_name,
        last_name="Tester",
        birthdate=date(1990, 5, 17),
        hashed_password=hash_password(password),
    )
    db.add(user)
    await db.commit()
    db.expunge(user)
    return user


@pytest_asyncio.fixture
async def user(db_session) -> User:
    return await _persist_user(db_session, "Alice", PASSWORD)


@pytest_asyncio.fixture
async def other_user(db_session) -> User:
    return await _persist_user(db_session, "Bob", SECOND_PASSWORD)


@pytest.fixture
def make_account(db_session):
    """
    Factory for persisted accounts.

    Balances can only move through transfers, so tests that need a specific
    starting balance set it here, directly on the row.
    """

    async def _make(
        owner: User | None,
        name: str | None = None,
        balance_cents: int = 0,
        dispo_cents: int = 0,
        limit_cents: int = 100_000,
    ) -> Account:
        account = Account(
            id=uuid.uuid4(),
            user_id=owner.id if owner is not None else None,
            name=name or f"Account {uuid.uuid4().hex[:8]}",
            balance_cents=balance_cents,
            dispo_cents=dispo_cents,
            limit_cents=limit_cents,
        )
        db_session.add(account)
        await db_session.commit()
        db_session.expunge(account)
        return account

    return _make


# ---------------------------------------------------------------------------
# HTTP-level fixtures
# ---------------------------------------------------------------------------

async def _register_and_login(client: AsyncClient, first_name: str, password: str):
    response = await client.post(
        "/users",
        json={
            "first_name": first_name,
            "last_name": "Tester",
            "birthdate": "17.05.1990",
            "password": password,
        },
    )
    assert response.status_code == 201, f"Registration failed: {response.text}"
    user_id = response.json()["value"]

    login = await client.post("/auth/login", json={"user_id": user_id, "password": password})
    assert login.status_code == 200, f"Login failed: {login.text}"
    token = login.json()["token"]
    return AuthenticatedPrincipal(user_id, {"Authorization": f"Bearer {token}"})


@pytest_asyncio.fixture
async def user_auth(client) -> AuthenticatedPrincipal:
    """A user registered and logged in through the real endpoints."""
    return await _register_and_login(client, "Alice", PASSWORD)


@pytest_asyncio.fixture
async def second_user_auth(client) -> AuthenticatedPrincipal:
    """A second user for cross-user authorization tests."""
    return await _register_and_login(client, "Bob", SECOND_PASSWORD)


@pytest_asyncio.fixture
async def admin_auth(client, session_factory) -> AuthenticatedPrincipal:
    """
    An administrator and its JWT.

    Administrators cannot sign up over HTTP; they are provisioned by an
    operator, which is what create_administrator does here.
    """
    async with session_factory() as session:
        result = await auth_service.create_administrator(session, "Ops", ADMIN_PASSWORD)
    administrator_id = str(result.value)

    login = await client.post(
        "/auth/admin/login",
        json={"administrator_id": administrator_id, "password": ADMIN_PASSWORD},
    )
    assert login.status_code == 200, f"Admin login failed: {login.text}"
    token = login.json()["token"]
    return AuthenticatedPrincipal(administrator_id, {"Authorization": f"Bearer {token}"})
