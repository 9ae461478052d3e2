"""
Shared definitions for the prompt gallery service and client.

Holds the closed category set, the search/tag matching rules used both by the
listing endpoint and by the client's offline fallback, and the bundled sample
prompts used for seeding and fallback data.
"""

from .categories import CATEGORIES, DEFAULT_CATEGORY, PromptCategory, is_valid_category
from .filters import filter_prompts, matches_search, matches_tags, normalize_search, parse_tag_param

__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "PromptCategory",
    "is_valid_category",
    "filter_prompts",
    "matches_search",
    "matches_tags",
    "normalize_search",
    "parse_tag_param",
]
