"""Service test fixtures — async DB + FastAPI test client + stub generation service.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - get_challenge_generator overridden with a ChallengeGenerator over StubTextGenerator

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - StubTextGenerator scripted per test via the `stub_generator` fixture
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from challenge_forge.db.base import Base
from challenge_forge.infrastructure.database import get_db, DatabaseSessionManager
import challenge_forge.infrastructure.database as db_module
import challenge_forge.models  # noqa: F401
from challenge_forge.main import app
from challenge_forge.services.challenge_generator import (
    ChallengeGenerator,
    get_challenge_generator,
)
from tests.services.stub_generator import StubTextGenerator


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
def stub_generator():
    return StubTextGenerator()


@pytest.fixture
async def client(test_engine, test_session_factory, stub_generator):
    """FastAPI test client with DB and generation dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_challenge_generator] = lambda: ChallengeGenerator(
        stub_generator, timeout_seconds=5,
    )

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
