import os

# Must be set before fittrack modules build the engine from settings
os.environ.setdefault("DATABASE_DSN", "sqlite+aiosqlite://")
os.environ.setdefault("ENCRYPTION_ITERATIONS", "1000")

from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fittrack.core.enums import UserRole
from fittrack.db.base import Base
from fittrack.db.session import configure_sqlite, get_db
from fittrack.main import app
from fittrack.models import *  # noqa: F401, F403
from fittrack.models.user import User
from fittrack.services.data_manager import get_data_manager

API = "/api/v1"
PASSWORD = "Str0ng!Pass"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    configure_sqlite(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    get_data_manager().cache.clear()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register(client: AsyncClient, email: str | None = None, timezone: str = "UTC") -> dict:
    """Register and log in; returns {"id", "email", "headers"}."""
    email = email or f"lifter-{uuid4().hex[:8]}@fittrack.app"
    r = await client.post(f"{API}/auth/register", json={"email": email, "password": PASSWORD, "timezone": timezone})
    assert r.status_code == 201, r.text
    user_id = r.json()["id"]
    r = await client.post(f"{API}/auth/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return {"id": user_id, "email": email, "headers": {"Authorization": f"Bearer {r.json()['access_token']}"}}


@pytest.fixture
async def user(client):
    return await register(client)


@pytest.fixture
async def auth_headers(user):
    return user["headers"]


@pytest.fixture
async def admin_headers(client, session_maker):
    admin = await register(client)
    async with session_maker() as session:
        await session.execute(update(User).where(User.email == admin["email"]).values(role=UserRole.ADMIN))
        await session.commit()
    return admin["headers"]


@pytest.fixture
async def exercise(client, auth_headers):
    r = await client.post(
        f"{API}/exercises",
        json={"name": "Bench Press", "category": "Chest", "equipment": "Barbell", "primary_muscles": ["chest"]},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def make_set(exercise_id, weight=None, reps=None, duration=None, completed=True, order=0, name="Bench Press"):
    return SimpleNamespace(
        id=uuid4(),
        exercise_id=exercise_id,
        exercise=SimpleNamespace(name=name),
        weight=weight,
        reps=reps,
        duration_seconds=duration,
        completed=completed,
        set_order=order,
    )


def make_session(sets, started_at=None, ended_at=None, completed_at=None):
    return SimpleNamespace(
        id=uuid4(),
        sets=sets,
        started_at=started_at,
        ended_at=ended_at,
        completed_at=completed_at,
    )
