"""Shared fixtures: in-memory SQLite database, sessions and an HTTP client."""

import os

# Before any gymlog import: settings are cached on first use
os.environ.setdefault("JWT_SECRET", "test-secret-for-the-suite-0123456789")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import gymlog.models  # noqa: F401 - register all models
from gymlog.core.enums import BodyPart, ExerciseType
from gymlog.db.base import Base
from gymlog.db.session import get_db
from gymlog.main import app
from gymlog.models.exercise import Exercise
from gymlog.models.user import User

EXERCISES = [
    ("bench-press", "Bench Press", "chest", "compound"),
    ("squat", "Back Squat", "legs", "compound"),
    ("deadlift", "Deadlift", "back", "compound"),
    ("bicep-curl", "Bicep Curl", "biceps", "isolated"),
]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite defers BEGIN, which breaks SAVEPOINT; emit it ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def users(db):
    """Two accounts; writer tests act as one or the other."""
    owner = User(email="owner@example.com", name="Owner", password="not-a-real-hash")
    other = User(email="other@example.com", name="Other", password="not-a-real-hash")
    db.add_all([owner, other])
    await db.commit()
    return owner, other


@pytest_asyncio.fixture
async def catalog(db):
    db.add_all(
        Exercise(
            id=ex_id,
            name=name,
            description=f"{name} description",
            body_part=BodyPart(part),
            exercise_type=ExerciseType(kind),
        )
        for ex_id, name, part, kind in EXERCISES
    )
    await db.commit()
    return [ex_id for ex_id, *_ in EXERCISES]


@pytest_asyncio.fixture
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
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register(client: AsyncClient, name: str, email: str, password: str = "secret123") -> dict:
    """Register an account; returns {"id", "token", "headers"}."""
    resp = await client.post("/api/v1/users/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {
        "id": body["data"]["id"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


async def seed_exercises(client: AsyncClient, headers: dict) -> list[str]:
    for ex_id, name, part, kind in EXERCISES:
        resp = await client.post(
            "/api/v1/exercises",
            json={
                "id": ex_id,
                "name": name,
                "description": f"{name} description",
                "body_part": part,
                "exercise_type": kind,
            },
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
    return [ex_id for ex_id, *_ in EXERCISES]
