# campus/core/database.py
"""Database connection and session management using SQLAlchemy."""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
import logging

from .config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """Pool and driver options; the server settings only apply to asyncpg."""
    options = {
        "pool_pre_ping": True,
        "echo": settings.database_echo,
    }
    if database_url.startswith("postgresql"):
        options.update(
            pool_size=15,
            max_overflow=25,
            pool_timeout=60,
            pool_recycle=1800,
            connect_args={
                "command_timeout": 60,
                "server_settings": {
                    "jit": "off",
                    "application_name": "campus_api",
                    "statement_timeout": "60s",
                    "idle_in_transaction_session_timeout": "60s",
                    "lock_timeout": "30s",
                }
            },
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

# Regular session factory for API requests and worker tasks
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise


async def close_db_connections():
    """Properly close all database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
