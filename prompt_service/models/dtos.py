"""
Pydantic Data Transfer Objects (DTOs) for the prompt service.

These models shape API responses and carry validated input into the store.
The wire format uses camelCase keys (``createdAt``, ``isTrending``).
"""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from prompt_common.categories import PromptCategory

from .prompt_orm import PromptORM, decode_tags


class PromptDTO(BaseModel):
    """
    DTO for a prompt record as returned by the API.

    Mirrors PromptORM with ``tags`` decoded to a list and the derived
    ``is_trending`` flag.
    """
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

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_orm_record(cls, record: PromptORM) -> "PromptDTO":
        tags = decode_tags(record.tags)
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            content=record.content,
            category=record.category,
            tags=tags,
            votes=record.votes,
            author=record.author,
            created_at=record.created_at,
            is_trending="trending" in tags,
        )


class PromptCreate(BaseModel):
    """Validated, normalized input for a new prompt."""
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: PromptCategory = "text"
    tags: List[str] = Field(..., min_length=1)
    author: str = "Anonymous"


class HealthResponse(BaseModel):
    status: str = "ok"
    redis: bool


class ErrorResponse(BaseModel):
    error: str


PROMPT_LIST_ADAPTER = TypeAdapter(List[PromptDTO])


def serialize_prompt_list(prompts: List[PromptDTO]) -> bytes:
    """Serialize a listing to the exact JSON bytes served and cached."""
    return PROMPT_LIST_ADAPTER.dump_json(prompts, by_alias=True)
