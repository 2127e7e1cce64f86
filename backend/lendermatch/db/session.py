"""Async engine and session factory for the reference data database."""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from lendermatch.config import settings

logger = logging.getLogger(__name__)


def async_database_url(url: str) -> str:
    """Point a plain postgresql:// URL at the asyncpg driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


if settings.ENVIRONMENT == "test":
    # Tests open and close connections across event loops
    engine = create_async_engine(
        async_database_url(settings.DATABASE_URL),
        echo=settings.DB_ECHO,
        poolclass=NullPool,
    )
else:
    engine = create_async_engine(
        async_database_url(settings.DATABASE_URL),
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )

SessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session that commits on success and rolls back on error.

    Yields:
        AsyncSession: Database session scoped to one request
    """
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.warning("Rolling back database session after error")
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close pooled connections on application shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")
