"""Database engine and session handling."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import Settings
from app.db.tables import Base
from app.utils.logging import get_logger

logger = get_logger(__name__)


def create_engine_for(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database URL.

    SQLite gets a NullPool so every session opens its own connection;
    other backends use the default queue pool with pre-ping.
    """
    url = settings.database_url
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=settings.db_echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )

    return create_async_engine(url, echo=settings.db_echo, pool_pre_ping=True)


class Database:
    """Process-scoped handle to the record and credential stores.

    Created once at startup and handed to request handlers; holds the
    connection pool and the session factory.
    """

    def __init__(self, settings: Settings):
        """Initialize engine and session factory from settings."""
        self.engine = create_engine_for(settings)
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def create_all(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that is closed when the block exits."""
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
