"""
Unit tests for app.db.session and app.db.init_db modules.
"""
import pytest
from sqlalchemy import inspect
from app.db.session import SessionLocal, get_db, engine
from app.db.init_db import init_db


class TestSession:
    """Test database session creation and management."""

    def test_sessionlocal_exists(self):
        """Test that SessionLocal is properly configured."""
        assert SessionLocal is not None
        assert hasattr(SessionLocal, '__call__')

    def test_engine_uses_configured_url(self):
        """Test that engine is created from settings."""
        assert engine.url.drivername == "sqlite+aiosqlite"

    async def test_get_db_generator(self):
        """Test that get_db yields a session and closes cleanly."""
        db_gen = get_db()

        session = await db_gen.__anext__()
        assert session is not None

        with pytest.raises(StopAsyncIteration):
            await db_gen.__anext__()


class TestInitDb:
    """Test init_db."""

    async def test_creates_tables(self):
        """Test both tables exist after init."""
        from sqlalchemy.ext.asyncio import create_async_engine

        bind = create_async_engine("sqlite+aiosqlite://")
        await init_db(bind)

        async with bind.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        await bind.dispose()

        assert {"checkins", "weekly_analyses"} <= set(tables)

    async def test_idempotent(self):
        """Test running init twice is harmless."""
        from sqlalchemy.ext.asyncio import create_async_engine

        bind = create_async_engine("sqlite+aiosqlite://")
        await init_db(bind)
        await init_db(bind)
        await bind.dispose()
