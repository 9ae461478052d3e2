"""Command-line interface for running and managing the prompt service."""

import asyncio
import logging
import sys

import typer
from typing_extensions import Annotated

from prompt_common.sample_prompts import SAMPLE_PROMPTS
from prompt_service.config.settings import settings
from prompt_service.core.prompt_store import PromptStore
from prompt_service.utils.db_health import check_db_connection, create_schema
from prompt_service.utils.db_session import get_async_engine, get_db_session_context_manager
from prompt_service.utils.logging_utils import setup_logging

app = typer.Typer(help="Prompt Gallery service - API server and database management")
logger = logging.getLogger(__name__)


@app.command("serve")
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = settings.API_HOST,
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = settings.API_PORT,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes (development)")] = False,
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run("prompt_service.api.main:app", host=host, port=port, reload=reload)


@app.command("init-db")
def init_db(
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
) -> None:
    """Create the prompts table from the ORM metadata (use Alembic for managed databases)."""
    setup_logging(level=loglevel)
    asyncio.run(_run(create_schema()))
    logger.info("✓ Database schema created")


@app.command("check-db")
def check_db(
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
) -> None:
    """Test the database connection."""
    setup_logging(level=loglevel)
    if not asyncio.run(_run(check_db_connection())):
        logger.error("Connection failed! Check DATABASE_URL and connectivity.")
        sys.exit(1)
    logger.info("✓ Connected to database successfully")


@app.command("seed")
def seed(
    force: Annotated[bool, typer.Option("--force", help="Insert the samples even if prompts already exist")] = False,
    loglevel: Annotated[str, typer.Option("--loglevel", "-l", help="Logging level")] = "INFO",
) -> None:
    """Seed the database with the bundled sample prompts."""
    setup_logging(level=loglevel)
    inserted = asyncio.run(_run(seed_database(force=force)))
    if inserted:
        logger.info(f"Seeding complete: {inserted} prompts inserted")
    else:
        logger.info("Database already has prompts - skipping seed (use --force to insert anyway)")


async def seed_database(force: bool = False) -> int:
    """Insert the sample prompts. Returns the number inserted (0 when skipped)."""
    await create_schema()
    async with get_db_session_context_manager() as session:
        store = PromptStore(session)
        if not force and await store.count() > 0:
            return 0
        return await store.bulk_insert(SAMPLE_PROMPTS)


async def _run(coro):
    """Await ``coro`` and dispose of the engine inside the same event loop."""
    try:
        return await coro
    finally:
        await get_async_engine().dispose()


if __name__ == "__main__":
    app()
