# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from postboard.core.config import Settings
from postboard.core.database import Database
from postboard.apps.posts.repositories.post_repository import PostRepository
from postboard.apps.posts.services.post_service import PostService
from postboard.main import create_app


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


class FakeClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock(datetime(2024, 1, 1, 9, 0, 0))
    monkeypatch.setattr(Settings, "get_now", lambda self: fake())
    return fake


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await db.create_all()
    yield db
    await db.disconnect()


@pytest.fixture
def repository(database):
    return PostRepository(database.get_session)


@pytest.fixture
def service(repository):
    return PostService(repository)


@pytest.fixture
async def client(database):
    app = create_app(database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def create_post(client: AsyncClient, title: str, content: str = "Some content", author: str = "alice") -> dict:
    r = await client.post("/api/posts", json={"title": title, "content": content, "author": author})
    assert r.status_code == 201, r.text
    return r.json()
