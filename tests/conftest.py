"""
Shared fixtures.

Settings are read once at import time, so the environment is pinned here
before anything from ``civiclink`` is imported.
"""

import os

os.environ["ENVIRONMENT"] = "dev"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["FANOUT_BACKEND"] = "memory"
os.environ["CLASSIFY_DEPARTMENT_ON_REPORT"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["AI_GATEWAY_API_KEY"] = "test-ai-key"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

import asyncio
from uuid import uuid4

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from civiclink.core.db import create_async_engine, get_async_session
from civiclink.core.identity import Actor, ActorRole
from civiclink.core.realtime import InMemoryFanoutBus
from civiclink.models import Base
from civiclink.services.issues import report_issue
from civiclink.services.notifications import NotificationDispatcher
from tests.helpers import make_issue_payload


async def _create_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def database_url(tmp_path) -> str:
    # A file database so separate sessions (and connections) share state
    return f"sqlite+aiosqlite:///{tmp_path / 'civiclink.db'}"


@pytest.fixture
async def engine(database_url):
    engine = create_async_engine(database_url, echo=False)
    await _create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def bus() -> InMemoryFanoutBus:
    return InMemoryFanoutBus()


@pytest.fixture
def dispatcher(bus) -> NotificationDispatcher:
    return NotificationDispatcher(bus)


@pytest.fixture
def reporter() -> Actor:
    return Actor(id=uuid4())


@pytest.fixture
def citizen() -> Actor:
    return Actor(id=uuid4())


@pytest.fixture
def other_citizen() -> Actor:
    return Actor(id=uuid4())


@pytest.fixture
def admin() -> Actor:
    return Actor(id=uuid4(), role=ActorRole.ADMIN)


@pytest.fixture
async def issue(db, bus, reporter):
    return await report_issue(db, bus, reporter, make_issue_payload())


# ---- HTTP fixtures ----


@pytest.fixture
def client(database_url):
    """TestClient over a fresh app, file database and in-memory bus."""
    from main import create_app

    engine = create_async_engine(database_url, echo=False)
    asyncio.run(_create_schema(engine))
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_async_session():
        async with factory() as session:
            yield session

    app = create_app(fanout_bus=InMemoryFanoutBus())
    app.dependency_overrides[get_async_session] = override_get_async_session

    with TestClient(app) as test_client:
        yield test_client

    asyncio.run(engine.dispose())

