from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from typing import Any, AsyncGenerator, Optional
from functools import lru_cache
from contextlib import asynccontextmanager

from prompt_service.config.settings import settings


@lru_cache
def get_async_engine():
    """Returns a cached instance of the async engine."""
    options = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if not settings.DATABASE_URL.startswith("sqlite"):
        options["pool_recycle"] = 3600
    engine = create_async_engine(settings.DATABASE_URL, **options)
    if engine.dialect.name == "sqlite":
        register_sqlite_functions(engine)
    return engine


def _unicode_lower(value: Optional[Any]) -> Optional[Any]:
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(engine: AsyncEngine) -> None:
    """
    Replace SQLite's ASCII-only ``lower()`` with a Unicode-aware one on
    every new connection. Search folds case with ``str.lower`` on both sides.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """Returns a cached instance of the async session factory."""
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function that yields an SQLAlchemy async session.

    Write paths commit explicitly before touching the listing cache; anything
    left uncommitted when the request fails is rolled back here.
    """
    factory = get_async_session_factory()
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db_session_context_manager() -> AsyncGenerator[AsyncSession, None]:
    """
    Provides an SQLAlchemy async session within an asynchronous context manager.

    Used outside request handling (CLI commands). The session is committed on
    successful exit, rolled back on error, and closed regardless.
    """
    factory = get_async_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
