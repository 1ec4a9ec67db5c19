"""
hnote Backend — Database Engine Construction
=============================================

What:  Async SQLAlchemy engine factory, session factory and declarative base.
How:   `build_engine()` turns Settings into an AsyncEngine with connection
       pooling; `build_session_factory()` wraps it in an async_sessionmaker.
Who:   NoteStore (owns the engine it is given) and Alembic (reads Base.metadata).
When:  Engine is created once at startup by the app lifespan or the tests.

Connection Pooling Strategy:
    PostgreSQL (asyncpg):
        pool_size=10, max_overflow=5:  at most 15 concurrent connections
        pool_pre_ping:                 validates connections before use
        pool_recycle=3600:             recycles connections every hour
    SQLite (aiosqlite):
        SQLAlchemy's default pool for the dialect; pool sizing does not apply.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from hnote.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Its metadata is the single source of the schema for both
    `NoteStore.connect()` (create_all) and Alembic autogenerate.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for `settings.database_url`.

    Echoes SQL when the log level is DEBUG.
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


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False keeps loaded attributes readable after the session
    that loaded them has committed and closed.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
