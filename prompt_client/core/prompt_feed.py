"""
Browsing state for the prompt gallery.

``PromptFeed`` owns the fetched listing and the active filters. Search text is
debounced before it reaches the service, tag changes refetch at once, and the
category filter is applied locally. When the service cannot be reached the
feed shows the bundled sample prompts, narrowed by the same rules the service
uses.

Overlapping listing requests are not sequenced: whichever response arrives
last becomes the listing.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Set

from loguru import logger

from prompt_common.categories import CATEGORIES
from prompt_common.filters import filter_prompts, normalize_search
from prompt_common.sample_prompts import fallback_prompts

from ..api.client import APIError, PromptAPIClient, PromptResponse
from ..config import get_settings
from ..votes import DIRECTIONS, VoteDirection, VoteLedger

ALL_CATEGORIES = "all"
FALLBACK_NOTICE = "Could not reach the prompt service. Showing sample prompts instead."


class VoteOutcome(str, Enum):
    ALREADY_VOTED = "already_voted"
    APPLIED = "applied"
    REVERTED = "reverted"


@dataclass(frozen=True)
class FeedStats:
    total: int
    trending: int
    total_votes: int
    categories: int


class PromptFeed:
    """
    Listing, filters and votes for one browsing session.

    Args:
        api_client: Client for the prompt service
        ledger: Local vote ledger
        debounce_seconds: Search debounce; defaults to ``search_debounce_seconds``
    """

    def __init__(
        self,
        api_client: PromptAPIClient,
        ledger: VoteLedger,
        debounce_seconds: Optional[float] = None,
    ):
        self.api_client = api_client
        self.ledger = ledger
        self.debounce_seconds = (
            get_settings().search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )

        self.prompts: List[PromptResponse] = []
        self.search_query = ""
        self.selected_tags: List[str] = []
        self.selected_category = ALL_CATEGORIES
        self.loading = False
        self.using_fallback = False
        self.notice: Optional[str] = None

        self._debounce_task: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()

    # Listing

    async def refresh(self) -> List[PromptResponse]:
        """
        Fetch the listing for the current search text and tags.

        Falls back to the bundled samples on any ``APIError`` (connection
        failures and timeouts included). ``loading`` is always cleared.
        """
        search = self.search_query
        tags = list(self.selected_tags)
        self.loading = True
        try:
            prompts = await self.api_client.list_prompts(search=search, tags=tags)
            self.using_fallback = False
            self.notice = None
        except APIError as e:
            logger.warning(f"Listing request failed, using sample prompts: {e.message}")
            prompts = self._fallback_listing(search, tags)
            self.using_fallback = True
            self.notice = FALLBACK_NOTICE
        finally:
            self.loading = False

        self.prompts = prompts
        return prompts

    @staticmethod
    def _fallback_listing(search: str, tags: Sequence[str]) -> List[PromptResponse]:
        samples = [PromptResponse.model_validate(record) for record in fallback_prompts()]
        return filter_prompts(samples, search=normalize_search(search), tags=tags)

    def set_search_query(self, text: str) -> None:
        """
        Update the search text and (re)start the debounce timer.

        Must be called from a running event loop. Only the timer is cancelled
        by a new keystroke; a request already sent is left to finish.
        """
        self.search_query = text
        self._cancel_debounce()
        self._debounce_task = self._spawn(self._debounced_refresh())

    async def _debounced_refresh(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._debounce_task = None
        await self.refresh()

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait_for_pending(self) -> None:
        """Wait for any debounced or in-flight refresh to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def toggle_tag(self, tag: str) -> List[PromptResponse]:
        if tag in self.selected_tags:
            self.selected_tags = [t for t in self.selected_tags if t != tag]
        else:
            self.selected_tags = self.selected_tags + [tag]
        return await self.refresh()

    async def set_selected_tags(self, tags: Sequence[str]) -> List[PromptResponse]:
        self.selected_tags = [tag for tag in tags if tag]
        return await self.refresh()

    def set_category(self, category: str) -> None:
        """Select a category (or ``"all"``). Filtering happens locally; nothing is fetched."""
        if category != ALL_CATEGORIES and category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category}")
        self.selected_category = category

    async def clear_filters(self) -> List[PromptResponse]:
        self._cancel_debounce()
        self.search_query = ""
        self.selected_tags = []
        self.selected_category = ALL_CATEGORIES
        return await self.refresh()

    @property
    def filtered_prompts(self) -> List[PromptResponse]:
        if self.selected_category == ALL_CATEGORIES:
            return list(self.prompts)
        return [p for p in self.prompts if p.category == self.selected_category]

    @property
    def stats(self) -> FeedStats:
        return FeedStats(
            total=len(self.prompts),
            trending=sum(1 for p in self.prompts if p.is_trending),
            total_votes=sum(p.votes for p in self.prompts),
            categories=len(CATEGORIES),
        )

    # Voting

    async def vote(self, prompt_id: str, direction: VoteDirection) -> VoteOutcome:
        """
        Cast one vote with an optimistic local update.

        The ledger entry is written before the request and kept if the request
        fails; only the local vote count is rolled back.

        Returns:
            VoteOutcome: ``ALREADY_VOTED`` without any request when the ledger
            has an entry, ``APPLIED`` on success, ``REVERTED`` on failure.
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")
        if self.ledger.has_voted(prompt_id):
            return VoteOutcome.ALREADY_VOTED

        delta = 1 if direction == "up" else -1
        self.ledger.record_vote(prompt_id, direction)
        self._apply_local_delta(prompt_id, delta)

        try:
            updated = await self.api_client.vote(prompt_id, delta)
        except Exception as e:
            logger.warning(f"Vote on {prompt_id} failed, reverting local count: {e}")
            self._apply_local_delta(prompt_id, -delta)
            return VoteOutcome.REVERTED

        self._replace_local(updated)
        return VoteOutcome.APPLIED

    def _apply_local_delta(self, prompt_id: str, delta: int) -> None:
        self.prompts = [
            p.model_copy(update={"votes": p.votes + delta}) if p.id == prompt_id else p
            for p in self.prompts
        ]

    def _replace_local(self, updated: PromptResponse) -> None:
        self.prompts = [updated if p.id == updated.id else p for p in self.prompts]
