"""Service test fixtures — async DB, scripted provider, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_auth_verifier, get_joke_generator overridden for route tests
    - Provider outcomes scripted per test through the `provider` fixture
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from punchline.api.dependencies import get_auth_verifier, get_joke_generator
from punchline.db.base import Base
from punchline.infrastructure.database import get_db, DatabaseSessionManager
import punchline.infrastructure.database as db_module
import punchline.models  # noqa: F401
from punchline.main import app
from punchline.services.joke_generator import JokeGenerator

from tests.services.fakes import CANDIDATES, FakeAuthVerifier, FakeProvider


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def provider():
    """Scripted provider; tests add outcomes with provider.script(...)."""
    return FakeProvider([])


@pytest.fixture
async def client(test_engine, test_session_factory, provider):
    """FastAPI test client with DB, auth, and generator overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    generator = JokeGenerator(provider, CANDIDATES)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_verifier] = lambda: FakeAuthVerifier()
    app.dependency_overrides[get_joke_generator] = lambda: generator

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
