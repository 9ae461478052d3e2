"""
Query Service for prompt listings.

Builds the store query for a listing request and narrows the decoded records
with the shared tag and search rules. Results keep the store's newest-first
order; filtering never reorders.
"""

import logging
from typing import List, Optional, Sequence

from prompt_common.filters import filter_prompts, normalize_search
from prompt_service.core.errors import PromptNotFoundError
from prompt_service.core.prompt_store import PromptStore
from prompt_service.models.dtos import PromptDTO

logger = logging.getLogger(__name__)


class PromptQueryService:
    def __init__(self, store: PromptStore):
        self.store = store

    async def list(
        self,
        search: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> List[PromptDTO]:
        """
        List prompts matching an optional search term and tag set.

        Args:
            search: Free text; blank means no search filter.
            tags: Tags combined with OR; empty means no tag filter.

        Returns:
            List[PromptDTO]: Matching prompts, newest first. Empty when nothing matches.
        """
        term = normalize_search(search)
        selected = [tag for tag in (tags or []) if tag]

        records = await self.store.list(search=term)
        prompts = [PromptDTO.from_orm_record(record) for record in records]

        if term or selected:
            prompts = filter_prompts(prompts, search=term, tags=selected)
            logger.debug(f"Filtered listing (search={term!r}, tags={selected}) to {len(prompts)} of {len(records)}")

        return prompts

    async def get(self, prompt_id: str) -> PromptDTO:
        record = await self.store.get(prompt_id)
        if record is None:
            raise PromptNotFoundError(prompt_id)
        return PromptDTO.from_orm_record(record)
