"""Test fixtures — a fresh in-memory database per test.

Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own aiosqlite in-memory engine (StaticPool keeps
   the single connection alive, so every session sees the same DB).
2. The schema is created from the ORM metadata and dropped afterwards.
   This is the only "reset" hook; production code has none.
3. The app's get_db dependency is overridden to yield the test session.

bcrypt rounds are dropped to the minimum before the app is imported,
so registration/login tests stay fast.
"""

import os
import uuid

os.environ.setdefault("JOBTRACKER_BCRYPT_ROUNDS", "4")
os.environ.setdefault("JOBTRACKER_JWT_SECRET", "test-signing-secret-0123456789abcdef")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from jobtracker.db.engine import get_db
from jobtracker.db.models import Base
from jobtracker.main import app

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a brand-new schema."""
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool, echo=False)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session):
    """HTTP client with the real auth pipeline and the test database."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def make_user(client):
    """Factory: register a user through the API, return (body, auth headers)."""
    async def _make(name: str = "Test User", email: str | None = None,
                    password: str = "secret1"):
        email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/auth/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "confirmPassword": password,
            },
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return body, {"Authorization": f"Bearer {body['token']}"}

    return _make


@pytest_asyncio.fixture()
async def auth_headers(make_user):
    """Authorization headers for a freshly registered user."""
    _, headers = await make_user()
    return headers
