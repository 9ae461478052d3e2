"""
SQLAlchemy ORM model for the 'prompts' table, plus the tag column codec.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, List, Sequence

from sqlalchemy import Index, Integer, String, Text, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base


def _new_prompt_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def encode_tags(tags: Sequence[str]) -> str:
    """Serialize a tag sequence for the text ``tags`` column."""
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(raw: Any) -> List[str]:
    """
    Decode the stored ``tags`` column into a list of strings.

    Already-decoded lists pass through unchanged; NULL or blank reads as an
    empty list.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return []
    if isinstance(raw, (list, tuple)):
        return [str(tag) for tag in raw]
    decoded = json.loads(raw)
    if not isinstance(decoded, list):
        raise ValueError(f"Stored tags are not a JSON array: {raw!r}")
    return [str(tag) for tag in decoded]


class PromptORM(Base):
    """
    SQLAlchemy ORM model representing a shared AI prompt.

    Attributes:
        id (str): Primary key, a UUID string assigned on insert.
        title (str): Short title shown in listings.
        description (str): One-line summary.
        content (str): The prompt text itself.
        category (str): One of image, video, text, code, automation.
        tags (str): JSON-encoded array of tag strings. Use ``encode_tags`` /
                    ``decode_tags``; callers of the store only see lists.
        votes (int): Net vote count, may go negative. Only changed by atomic increments.
        author (str): Display name, "Anonymous" when not given.
        created_at (datetime): Insert timestamp (UTC, microsecond precision).
    """
    __tablename__ = "prompts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_prompt_id, comment="Store-assigned prompt identifier.")
    title: Mapped[str] = mapped_column(Text, nullable=False, comment="Prompt title.")
    description: Mapped[str] = mapped_column(Text, nullable=False, comment="Short description of the prompt.")
    content: Mapped[str] = mapped_column(Text, nullable=False, comment="Prompt body text.")
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="text", server_default="text", comment="Prompt category.")
    tags: Mapped[str] = mapped_column(Text, nullable=False, default="[]", server_default="[]", comment="JSON-encoded array of tags.")
    votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0", comment="Net vote count.")
    author: Mapped[str] = mapped_column(Text, nullable=False, default="Anonymous", server_default="Anonymous", comment="Author display name.")
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, server_default=func.now(), comment="Creation timestamp.")

    __table_args__ = (
        Index("ix_prompts_created_at", "created_at"),
        {"comment": "Shared AI prompts."},
    )

    @property
    def tag_list(self) -> List[str]:
        return decode_tags(self.tags)

    def __repr__(self) -> str:
        return f"<PromptORM(id='{self.id}', title='{self.title}', votes={self.votes})>"
