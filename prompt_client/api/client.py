"""
HTTP client for the prompt gallery service.

This module provides an async client for the prompt service REST endpoints,
including error handling, retry logic for reads, and response validation.
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import get_settings

RETRYABLE_STATUS = {429, 502, 503, 504}


class PromptResponse(BaseModel):
    """Response model for a prompt record."""
    id: str
    title: str
    description: str
    content: str
    category: str
    tags: List[str]
    votes: int
    author: str
    created_at: datetime = Field(alias="createdAt")
    is_trending: bool = Field(default=False, alias="isTrending")

    model_config = ConfigDict(populate_by_name=True)


class CreatePromptRequest(BaseModel):
    """Request model for a prompt submission."""
    title: str
    description: str
    content: str
    category: str = "text"
    tags: List[str]
    author: Optional[str] = None


class APIError(Exception):
    """Raised for transport failures, error responses and unparseable bodies."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text


class PromptAPIClient:
    """
    Async HTTP client for the prompt gallery API.

    Use as an async context manager, or call ``aclose()`` when done. Only GET
    requests are retried; a failed vote or submission is reported once so the
    caller can decide what to roll back.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the prompt service
            timeout: Request timeout in seconds
            retries: Retry attempts for GET requests
            transport: Optional httpx transport (used by tests)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.api_timeout
        self.retries = settings.api_retries if retries is None else retries

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )
        logger.debug(f"Initialized PromptAPIClient with base_url: {self.base_url}")

    async def __aenter__(self) -> "PromptAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Make an HTTP request, retrying GETs on transport errors and transient statuses.

        Returns:
            httpx.Response: A 2xx response

        Raises:
            APIError: If the request fails or the service answers with an error
        """
        retries = self.retries if method == "GET" else 0

        for attempt in range(retries + 1):
            try:
                logger.debug(f"{method} {endpoint} (attempt {attempt + 1})")
                response = await self._client.request(method, endpoint, params=params, json=json_data)
            except httpx.HTTPError as e:
                if attempt < retries:
                    wait_time = 2 ** attempt
                    logger.warning(f"Request failed, retrying in {wait_time}s: {e!r}")
                    await asyncio.sleep(wait_time)
                    continue
                raise APIError(f"{method} {endpoint} failed: {e!r}") from e

            if response.is_success:
                return response

            if response.status_code in RETRYABLE_STATUS and attempt < retries:
                wait_time = 2 ** attempt
                logger.warning(f"HTTP {response.status_code} from {endpoint}, retrying in {wait_time}s")
                await asyncio.sleep(wait_time)
                continue

            raise APIError(_error_message(response), response.status_code)

        raise APIError(f"{method} {endpoint} failed after {retries} retries")

    async def list_prompts(
        self,
        search: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> List[PromptResponse]:
        """
        Retrieve prompts, newest first.

        Args:
            search: Free-text filter; blank values are not sent
            tags: Tags combined with OR; sent as one comma-separated parameter,
                which is safe because the service rejects tags containing commas

        Returns:
            List[PromptResponse]: Matching prompts

        Raises:
            APIError: If the request fails
        """
        params: Dict[str, str] = {}
        if search and search.strip():
            params["search"] = search.strip()
        if tags:
            params["tags"] = ",".join(tags)

        response = await self._request("GET", "/api/prompts", params=params or None)

        try:
            return [PromptResponse.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            raise APIError(f"Failed to parse prompt listing: {e}")

    async def get_prompt(self, prompt_id: str) -> PromptResponse:
        response = await self._request("GET", f"/api/prompts/{quote(prompt_id, safe='')}")
        return self._parse_prompt(response)

    async def create_prompt(self, request: CreatePromptRequest) -> PromptResponse:
        """
        Submit a new prompt.

        Raises:
            APIError: With status 400 and the service's message on validation failure
        """
        response = await self._request(
            "POST",
            "/api/prompts",
            json_data=request.model_dump(exclude_none=True),
        )
        return self._parse_prompt(response)

    async def vote(self, prompt_id: str, delta: int) -> PromptResponse:
        """Send a single +1 / -1 vote and return the updated record."""
        response = await self._request(
            "PATCH",
            f"/api/prompts/{quote(prompt_id, safe='')}/vote",
            json_data={"delta": delta},
        )
        return self._parse_prompt(response)

    async def health_check(self) -> Dict[str, Any]:
        """
        Check API health status.

        Returns:
            Dict[str, Any]: ``{"status": ..., "redis": ...}``
        """
        response = await self._request("GET", "/api/health")
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Failed to parse health response: {e}")

    @staticmethod
    def _parse_prompt(response: httpx.Response) -> PromptResponse:
        try:
            return PromptResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise APIError(f"Failed to parse prompt response: {e}")
