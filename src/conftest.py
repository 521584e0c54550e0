import contextlib
import os

# the test engine is derived from DB_DSN, point it at a local SQLite file unless told otherwise
os.environ.setdefault("DB_DSN", "sqlite+aiosqlite:///./wedding.db")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.config.database import engine  # noqa: E402
from src.main import app  # noqa: E402
from src.models.base import BaseModel  # noqa: E402


@pytest_asyncio.fixture(autouse=True)
async def test_db():
    """Create a fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture
def client_factory():
    """Build a test client with the given dependency overrides."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None, raise_app_exceptions: bool = True):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory):
    """Create a test client."""
    async with client_factory() as ac:
        yield ac
