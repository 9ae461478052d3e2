"""
Prompt API endpoints.

This module implements the listing, detail, create and vote endpoints. Only
the unfiltered listing goes through the listing cache; every successful
mutation invalidates it.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from prompt_common.filters import normalize_search, parse_tag_param
from prompt_service.core.errors import PromptNotFoundError, PromptValidationError
from prompt_service.core.listing_cache import PromptListingCache
from prompt_service.core.prompt_store import PromptStore
from prompt_service.core.query_service import PromptQueryService
from prompt_service.core.validation import validate_new_prompt, validate_vote_delta
from prompt_service.models.dtos import ErrorResponse, PromptDTO, serialize_prompt_list
from prompt_service.utils.db_session import get_db_session

router = APIRouter()
logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"
NOT_FOUND = "Prompt not found"


def get_prompt_cache(request: Request) -> PromptListingCache:
    """Get the process-wide listing cache created at startup."""
    return request.app.state.prompt_cache


async def get_prompt_store(session: AsyncSession = Depends(get_db_session)) -> PromptStore:
    return PromptStore(session)


async def get_query_service(store: PromptStore = Depends(get_prompt_store)) -> PromptQueryService:
    return PromptQueryService(store)


@router.get(
    "",
    response_model=List[PromptDTO],
    responses={500: {"model": ErrorResponse}},
)
async def list_prompts(
    search: Optional[str] = Query(None, description="Case-insensitive text matched against title, description and tags"),
    tags: Optional[str] = Query(None, description="Comma-separated tags; a prompt matches if it has any of them"),
    cache: PromptListingCache = Depends(get_prompt_cache),
    query_service: PromptQueryService = Depends(get_query_service),
) -> Response:
    """
    List prompts, newest first.

    Requests without a search term or tag filter are served from the listing
    cache when possible, and a miss writes the fresh listing back. Filtered
    requests always query the store and never touch the cache.

    Args:
        search: Optional search text
        tags: Optional comma-separated tag filter
        cache: Listing cache
        query_service: Query service bound to this request's session

    Returns:
        Response: JSON array of prompts (possibly empty)

    Raises:
        HTTPException: 500 if the store query fails
    """
    term = normalize_search(search)
    tag_list = parse_tag_param(tags)
    has_filters = bool(term or tag_list)

    if not has_filters:
        cached = await cache.get()
        if cached.hit:
            logger.debug(f"Serving prompt listing from {cached.tier.value} cache")
            return Response(content=cached.snapshot, media_type="application/json")

    try:
        prompts = await query_service.list(search=term, tags=tag_list)
    except Exception as e:
        logger.error(f"Error listing prompts: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    body = serialize_prompt_list(prompts)

    if not has_filters:
        tier = await cache.set(body)
        logger.debug(f"Cached prompt listing ({len(prompts)} prompts) in {tier.value} tier")

    return Response(content=body, media_type="application/json")


@router.get(
    "/{prompt_id}",
    response_model=PromptDTO,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_prompt(
    prompt_id: str,
    query_service: PromptQueryService = Depends(get_query_service),
) -> PromptDTO:
    """Fetch a single prompt by id."""
    try:
        return await query_service.get(prompt_id)
    except PromptNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except Exception as e:
        logger.error(f"Error fetching prompt {prompt_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)


@router.post(
    "",
    response_model=PromptDTO,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_prompt(
    payload: Optional[Dict[str, Any]] = Body(None),
    store: PromptStore = Depends(get_prompt_store),
    cache: PromptListingCache = Depends(get_prompt_cache),
) -> PromptDTO:
    """
    Create a prompt.

    Validation failures return 400 without touching the store or the cache.
    On success the listing cache is invalidated.
    """
    try:
        new_prompt = validate_new_prompt(payload)
    except PromptValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        record = await store.create(new_prompt)
        created = PromptDTO.from_orm_record(record)
    except Exception as e:
        logger.error(f"Error creating prompt: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    await cache.invalidate()
    return created


@router.patch(
    "/{prompt_id}/vote",
    response_model=PromptDTO,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def vote_prompt(
    prompt_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    store: PromptStore = Depends(get_prompt_store),
    cache: PromptListingCache = Depends(get_prompt_cache),
) -> PromptDTO:
    """
    Apply a single +1 or -1 vote.

    The increment runs atomically in the store. Any delta other than 1 or -1
    is rejected with 400; an unknown id yields 404.
    """
    try:
        delta = validate_vote_delta(payload)
    except PromptValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        record = await store.apply_vote(prompt_id, delta)
        updated = PromptDTO.from_orm_record(record)
    except PromptNotFoundError:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    except Exception as e:
        logger.error(f"Error voting on prompt {prompt_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    await cache.invalidate()
    return updated
