"""
iBuddy Backend — Document Store Handle
========================================

What:  Engine/session factory wrapper, declarative base, and the FastAPI
       dependency that hands a session to each request.
How:   `Database` is constructed explicitly by the application lifespan
       (main.py), stored on `app.state.database`, and disposed on shutdown.
       Nothing in this module opens a connection at import time.
Who:   Route handlers receive sessions through `get_db_session`; the stores
       receive those sessions as arguments.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ibuddy.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata is what Alembic tracks."""


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured URL.

    Pool sizing options only apply to server databases; SQLite uses a
    single-connection pool and rejects them.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


class Database:
    """
    Process-wide handle to the document store.

    Lifetime: created once by the process entry point, closed with
    `dispose()` when the process shuts down.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: records stay readable after the request commits
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(build_engine(settings))

    async def create_all(self) -> None:
        """Create missing tables. Used for SQLite development setups and tests."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Document store unreachable: %s", str(e))
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session that commits on success and rolls back on any error.

        Multi-step writes issued through one session are committed together
        at the end of the request; the stores themselves never commit.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing one session per request.

    Example usage in a route:
        @router.get("/mentees")
        async def list_mentees(db: AsyncSession = Depends(get_db_session)):
            return await mentee_service.get_all_mentees(db)
    """
    async with get_database(request).session() as session:
        yield session
