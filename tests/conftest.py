from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shootbook.database import create_tables, drop_tables, get_db
from shootbook.main import app
from shootbook.storage import LocalImageStore, get_image_store

test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
test_session = async_sessionmaker(test_engine, expire_on_commit=False)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    await create_tables(test_engine)
    yield
    await drop_tables(test_engine)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def image_store(tmp_path: Path) -> Generator[LocalImageStore, None, None]:
    store = LocalImageStore(tmp_path / "images", "/media/session-images")
    app.dependency_overrides[get_image_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_image_store, None)
