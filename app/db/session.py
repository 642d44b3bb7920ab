import logging
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from app.core.config import settings

logger = logging.getLogger(__name__)

_db_url = str(settings.DATABASE_URL)
if _db_url.startswith("postgresql://"):
    _db_url = _db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
logger.info("DATABASE_URL: %s...", _db_url[:30])  # Log first chars for debugging

engine = create_async_engine(
    _db_url,
    pool_pre_ping=True,
    echo=False,
)

SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def check_db_connection(session: AsyncSession) -> bool:
    """
    Simple connectivity probe that returns True/False without raising.
    """
    try:
        await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database connection test failed: %s", e)
        return False

async def get_db():
    """
    Dependency that provides a database session per request.
    """
    async with SessionLocal() as session:
        yield session
