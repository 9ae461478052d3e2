"""Database health check utilities for startup scripts."""

import logging

from sqlalchemy import text

from prompt_service.utils.db_session import get_async_engine

logger = logging.getLogger(__name__)


async def check_db_connection() -> bool:
    """
    Test database connection for startup health checks.

    Returns:
        bool: True if connection successful, False otherwise.
    """
    try:
        engine = get_async_engine()
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database connection check failed: {e}")
        return False


async def create_schema() -> None:
    """Create the ``prompts`` table directly from ORM metadata (development setups)."""
    from prompt_service.models.base import Base
    from prompt_service.models import prompt_orm  # noqa: F401  register the table

    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
