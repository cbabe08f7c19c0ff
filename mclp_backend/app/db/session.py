"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. Repositories never reach for the
engine directly; they receive the session yielded by ``get_db``.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from mclp_backend.app.core.config import settings


def build_engine(database_url: str = None):
    """Create the async engine, skipping pool sizing for SQLite."""
    url = database_url or settings.database_url
    options = {"echo": settings.db_echo, "future": True}
    if not url.startswith("sqlite"):
        options.update(pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)
    return create_async_engine(url, **options)


# Create async engine
engine = build_engine()

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
