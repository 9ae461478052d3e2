"""Core components of the prompt service: store access, listing queries and the listing cache."""

from .errors import PromptNotFoundError, PromptServiceError, PromptValidationError
from .listing_cache import CacheRead, CacheTier, MemoryTier, PromptListingCache, RedisTier, TierResult
from .prompt_store import PromptStore
from .query_service import PromptQueryService

__all__ = [
    "CacheRead",
    "CacheTier",
    "MemoryTier",
    "PromptListingCache",
    "PromptNotFoundError",
    "PromptQueryService",
    "PromptServiceError",
    "PromptStore",
    "PromptValidationError",
    "RedisTier",
    "TierResult",
]
