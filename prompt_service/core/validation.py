"""
Input validation for the mutation endpoints.

Checks run in a fixed order so the first failing field decides the message.
"""

from typing import Any, List, Mapping, Optional

from prompt_common.categories import CATEGORIES, DEFAULT_CATEGORY, is_valid_category
from prompt_service.core.errors import PromptValidationError
from prompt_service.models.dtos import PromptCreate

DEFAULT_AUTHOR = "Anonymous"
VALID_DELTAS = (1, -1)
TAG_SEPARATOR = ","


def _clean_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def _clean_tags(value: Any) -> List[str]:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    if not isinstance(value, list):
        return []
    cleaned: List[str] = []
    for tag in value:
        if not isinstance(tag, str):
            continue
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def validate_new_prompt(payload: Optional[Mapping[str, Any]]) -> PromptCreate:
    """
    Validate and normalize a create-prompt request body.

    Args:
        payload: Decoded JSON body, or None when the request had no body.

    Returns:
        PromptCreate: Trimmed fields with category and author defaults applied.

    Raises:
        PromptValidationError: With a field-specific message for the first failing field.
    """
    data = payload or {}

    title = _clean_text(data.get("title"))
    if not title:
        raise PromptValidationError("Title is required")

    description = _clean_text(data.get("description"))
    if not description:
        raise PromptValidationError("Description is required")

    content = _clean_text(data.get("content"))
    if not content:
        raise PromptValidationError("Content is required")

    tags = _clean_tags(data.get("tags"))
    if not tags:
        raise PromptValidationError("At least one tag is required")
    # The listing filter takes tags as one comma-separated parameter
    if any(TAG_SEPARATOR in tag for tag in tags):
        raise PromptValidationError("Tags cannot contain commas")

    category = data.get("category") or DEFAULT_CATEGORY
    if not is_valid_category(category):
        raise PromptValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")

    author = _clean_text(data.get("author")) or DEFAULT_AUTHOR

    return PromptCreate(
        title=title,
        description=description,
        content=content,
        category=category,
        tags=tags,
        author=author,
    )


def validate_vote_delta(payload: Optional[Mapping[str, Any]]) -> int:
    """Return the vote delta, which must be exactly 1 or -1."""
    delta = (payload or {}).get("delta")
    # bool is an int subclass; True must not count as +1
    if isinstance(delta, bool) or not isinstance(delta, (int, float)) or delta not in VALID_DELTAS:
        raise PromptValidationError("delta must be 1 or -1")
    return int(delta)
