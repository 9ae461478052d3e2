"""
Store access for prompt records.

Wraps an ``AsyncSession`` and is the only place that touches the serialized
``tags`` column: tags are encoded on every write and the records handed back
are decoded by ``PromptDTO.from_orm_record``.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from prompt_service.core.errors import PromptNotFoundError
from prompt_service.models.dtos import PromptCreate
from prompt_service.models.prompt_orm import PromptORM, encode_tags

logger = logging.getLogger(__name__)


class PromptStore:
    """Create/read/vote operations over the ``prompts`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(self, search: Optional[str] = None) -> List[PromptORM]:
        """
        Fetch prompts newest first, optionally narrowed by a search term.

        The search clause matches title and description case-insensitively.
        It also matches against the serialized tags text so that tag-only
        matches survive to the exact tag check done after retrieval.

        Args:
            search: Already-normalized search term, or None.

        Returns:
            List[PromptORM]: Records ordered by creation time, descending.
        """
        query = select(PromptORM)

        if search:
            term = search.lower()
            query = query.where(
                or_(
                    func.lower(PromptORM.title).contains(term, autoescape=True),
                    func.lower(PromptORM.description).contains(term, autoescape=True),
                    func.lower(PromptORM.tags).contains(term, autoescape=True),
                )
            )

        # Order by created_at DESC, id DESC for a stable listing
        query = query.order_by(desc(PromptORM.created_at), desc(PromptORM.id))

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, prompt_id: str) -> Optional[PromptORM]:
        return await self.session.get(PromptORM, prompt_id)

    async def create(self, data: PromptCreate) -> PromptORM:
        """Insert a validated prompt and commit. The store assigns id and timestamp."""
        record = PromptORM(
            title=data.title,
            description=data.description,
            content=data.content,
            category=data.category,
            tags=encode_tags(data.tags),
            author=data.author,
            votes=0,
        )
        self.session.add(record)
        await self.session.commit()
        logger.info(f"Created prompt {record.id} ({record.category})")
        return record

    async def apply_vote(self, prompt_id: str, delta: int) -> PromptORM:
        """
        Atomically add ``delta`` to a prompt's vote count and commit.

        The increment is a single ``UPDATE ... SET votes = votes + :delta``
        so concurrent votes accumulate regardless of interleaving.

        Raises:
            PromptNotFoundError: If no prompt has ``prompt_id``.
        """
        stmt = (
            update(PromptORM)
            .where(PromptORM.id == prompt_id)
            .values(votes=PromptORM.votes + delta)
            .returning(PromptORM)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        updated = result.scalar_one_or_none()
        if updated is None:
            raise PromptNotFoundError(prompt_id)

        await self.session.commit()
        logger.info(f"Applied vote {delta:+d} to prompt {prompt_id}, now {updated.votes}")
        return updated

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(PromptORM))
        return int(result.scalar_one())

    async def bulk_insert(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Insert pre-built records (seeding). Vote counts and authors are taken as given."""
        rows = [
            PromptORM(
                title=record["title"],
                description=record["description"],
                content=record["content"],
                category=record.get("category", "text"),
                tags=encode_tags(record.get("tags", [])),
                votes=record.get("votes", 0),
                author=record.get("author", "Anonymous"),
            )
            for record in records
        ]
        self.session.add_all(rows)
        await self.session.commit()
        return len(rows)
