"""
AudioStudio Database Connection Manager
Async database connections for PostgreSQL (asyncpg) and SQLite (aiosqlite)
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from ..core.config import AudioStudioSettings, get_settings
from ..core.logging import storage_logger

# SQLAlchemy base for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    """Manages database connections and sessions"""

    def __init__(self, settings: Optional[AudioStudioSettings] = None):
        self.settings = settings or get_settings()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        if not self._engine:
            raise RuntimeError("Database not initialized")
        return self._engine

    async def initialize(self) -> None:
        """Create the engine and session factory"""
        engine_kwargs = {
            "echo": False,
            "pool_pre_ping": True,  # Verify connections before use
        }
        if not self.settings.uses_sqlite:
            engine_kwargs["pool_size"] = self.settings.DATABASE_POOL_SIZE
            engine_kwargs["max_overflow"] = self.settings.DATABASE_MAX_OVERFLOW

        self._engine = create_async_engine(self.settings.DATABASE_URL, **engine_kwargs)

        # Cascading deletes rely on foreign keys, which SQLite leaves off by default
        if self.settings.uses_sqlite:
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def close(self) -> None:
        """Close database connections"""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session"""
        if not self._session_factory:
            raise RuntimeError("Database not initialized")

        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def check_health(self) -> bool:
        """Check database health"""
        try:
            async with self.get_session() as session:
                result = await session.execute(text("SELECT 1"))
                result.fetchone()
            return True

        except Exception as e:
            storage_logger.log_database_error("health_check", str(e))
            return False

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet"""
        # Import models so every table is registered on the metadata
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
