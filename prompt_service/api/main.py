"""
FastAPI application for the prompt gallery service.

This module initializes and configures the FastAPI application that serves
the prompt listing, detail, submission and voting endpoints.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prompt_service.api.endpoints import prompts
from prompt_service.config.settings import settings
from prompt_service.core.listing_cache import PromptListingCache
from prompt_service.models.dtos import HealthResponse
from prompt_service.utils.db_session import get_async_engine
from prompt_service.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Creates the listing cache once per process (unless one was injected),
    sends the initial Redis ready check, and releases connections on shutdown.
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if getattr(app.state, "prompt_cache", None) is None:
        app.state.prompt_cache = PromptListingCache.from_settings(settings)

    redis_ready = await app.state.prompt_cache.connect()
    logger.info(f"Listing cache initialized (redis available: {redis_ready})")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await app.state.prompt_cache.close()
    await get_async_engine().dispose()


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as ``{"error": message}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies or parameters are client errors (400), not 422."""
    errors = exc.errors()
    location = ".".join(str(part) for part in errors[0]["loc"]) if errors else "request"
    logger.info(f"Rejected malformed request to {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"error": f"Invalid {location}"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": prompts.SERVER_ERROR})


def create_app(prompt_cache: Optional[PromptListingCache] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        prompt_cache: Listing cache to use instead of building one from settings.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""Prompt gallery API for browsing, searching, submitting and voting on AI prompts.

        This API provides endpoints for:
        - Listing prompts with search and tag filters
        - Fetching a single prompt
        - Submitting new prompts
        - Up/down voting
        - Health monitoring""",
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,  # Disable docs in production
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_tags=[
            {
                "name": "prompts",
                "description": "Prompt listing and mutation operations"
            },
            {
                "name": "health",
                "description": "Health check and monitoring"
            }
        ]
    )
    app.state.prompt_cache = prompt_cache

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS if not settings.DEBUG else ["*"],
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(
        prompts.router,
        prefix="/api/prompts",
        tags=["prompts"]
    )

    @app.get("/api/health", tags=["health"], response_model=HealthResponse, summary="Health Check")
    async def health_check(request: Request) -> HealthResponse:
        """Report service status and whether the Redis cache tier is available."""
        cache: Optional[PromptListingCache] = request.app.state.prompt_cache
        return HealthResponse(status="ok", redis=cache.available() if cache is not None else False)

    return app


# Create the application instance
app = create_app()
