import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["MEDIA_DIR"] = tempfile.mkdtemp(prefix="cottage-media-")
os.environ["ADMIN_PASSWORD"] = "cottage2026admin"
os.environ["CORS_ORIGINS"] = "https://cottage.example.app"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database import enable_sqlite_savepoints, get_db, init_db
from main import app
from schemas import OptionCreate


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def room(client):
    response = await client.post("/api/rooms/", json={"name": "Smith Trip", "adminName": "Jo"})
    assert response.status_code == 200
    return response.json()


def admin_headers(room):
    return {"X-Admin-Token": room["adminToken"]}


def option_in(code, nickname="Cabin", **fields):
    fields.setdefault("title", f"{nickname} on the lake")
    return OptionCreate(code=code, nickname=nickname, **fields)
