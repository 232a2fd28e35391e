"""Shared fixtures: the API runs against an in-memory SQLite database."""
import asyncio
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import Any

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dashboard_api.db.session import Base, get_session
from dashboard_api.main import app
from dashboard_api.realtime import relay


class FakeSubscriber:
    """Records every frame the relay sends to it."""

    def __init__(self, fail: bool = False, hang: bool = False):
        self.fail = fail
        self.hang = hang
        self.sent: list[dict] = []

    async def send_json(self, data: Any) -> None:
        if self.hang:
            await asyncio.Event().wait()
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)

    def events(self, name: str) -> list[dict]:
        return [frame["data"] for frame in self.sent if frame["event"] == name]


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


class BrokenSession:
    """Session double whose every query fails as if the database were down."""

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    async def get(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.fixture
def database_down(client):
    """Route every request to a :class:`BrokenSession`; ``client`` clears the override on teardown."""

    async def broken_session():
        yield BrokenSession()

    app.dependency_overrides[get_session] = broken_session


@pytest.fixture
def subscriber_factory():
    return FakeSubscriber


@pytest.fixture
def subscriber():
    fake = FakeSubscriber()
    subscriber_id = relay.subscribe(fake)
    yield fake
    relay.unsubscribe(subscriber_id)


@pytest.fixture
def make_agent(client):
    async def _make_agent(**overrides: Any) -> dict:
        body = {"name": "Trends Scout", "role": "Product Research", **overrides}
        response = await client.post("/api/agents", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_agent


@pytest.fixture
def make_task(client):
    async def _make_task(agent_id: str, **overrides: Any) -> dict:
        body = {"agentId": agent_id, "type": "trends", **overrides}
        response = await client.post("/api/tasks", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_task
