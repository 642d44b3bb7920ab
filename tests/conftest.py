"""
Pytest configuration and shared fixtures for all tests.
"""
import os

# Settings are read at import time, so the test environment goes in first.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["MODEL_BACKEND"] = "none"
os.environ["JWT_SECRET"] = "test-secret"

import random
import uuid
from types import SimpleNamespace
from typing import AsyncGenerator
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.models import Base
from app.main import create_app
from app.services.model import ModelCandidate


@pytest.fixture
async def test_engine():
    """In-memory SQLite engine shared by every session of one test."""
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
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for a test."""
    SessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with SessionLocal() as session:
        yield session


@pytest.fixture
def test_user_id() -> uuid.UUID:
    """Generate a test user ID."""
    return uuid.UUID("123e4567-e89b-12d3-a456-426614174000")


@pytest.fixture
def another_user_id() -> uuid.UUID:
    """Generate another test user ID for multi-user tests."""
    return uuid.UUID("223e4567-e89b-12d3-a456-426614174001")


@pytest.fixture
def seeded_rng():
    """Reproducible random source for reply selection."""
    return random.Random(1234)


class StubModel:
    """Summary model returning a fixed candidate."""

    def __init__(self, summary="", recommendation=""):
        self.candidate = ModelCandidate(summary=summary, recommendation=recommendation)
        self.calls = []

    async def predict(self, emotions, texts, predominant):
        self.calls.append((emotions, texts, predominant))
        return self.candidate


class FailingModel:
    """Summary model whose inference always blows up."""

    def __init__(self):
        self.calls = 0

    async def predict(self, emotions, texts, predominant):
        self.calls += 1
        raise RuntimeError("inference crashed")


@pytest.fixture
def stub_model_factory():
    return StubModel


@pytest.fixture
def failing_model():
    return FailingModel()


@pytest.fixture
def make_checkin():
    """Lightweight check-in stand-in for engine tests."""
    def _make(emotion, text="", created_at=None):
        return SimpleNamespace(emotion=emotion, text=text, created_at=created_at or datetime.now(timezone.utc))
    return _make


@pytest.fixture
def app_factory(db_session, test_user_id):
    """Build an app wired to the test database and a fixed user."""
    from app.db.session import get_db
    from app.core.security import get_current_user

    def _build(summary_model=None, rng=None):
        app = create_app(summary_model=summary_model or StubModel(), rng=rng or random.Random(7))

        async def override_get_db():
            yield db_session

        async def override_auth():
            return {"user_id": str(test_user_id), "role": "authenticated"}

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_current_user] = override_auth
        return app

    return _build


@pytest.fixture
async def client(app_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with mocked authentication."""
    app = app_factory()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
