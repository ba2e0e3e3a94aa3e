"""
Database configuration and session management
Uses SQLAlchemy with async support
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from .config import settings
from .exceptions import StorageException
from storefront.models import Base

logger = logging.getLogger(__name__)

def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine, skipping pool options SQLite does not accept"""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, poolclass=NullPool)

    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,  # Verify connections before use
    )

def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

engine = build_engine(settings.database_url_async, echo=settings.DATABASE_ECHO)
AsyncSessionLocal = build_sessionmaker(engine)

# Database dependency
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield database session
    Services commit their own units of work; anything left open is rolled back
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

async def init_db(bind: AsyncEngine = engine) -> None:
    """Initialize database tables"""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")

async def close_db(bind: AsyncEngine = engine) -> None:
    """Close database connections"""
    await bind.dispose()
    logger.info("Database connections closed")

@asynccontextmanager
async def transaction(session: AsyncSession, action: str) -> AsyncGenerator[AsyncSession, None]:
    """
    Run one unit of work: commit on success, roll back on any failure
    Store errors surface as StorageException with the original chained
    """
    try:
        yield session
        await session.commit()
    except Exception as e:
        await session.rollback()
        if isinstance(e, SQLAlchemyError):
            raise StorageException(f"Failed to {action}: {e}") from e
        raise
