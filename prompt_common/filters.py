"""
Search and tag matching rules for prompt listings.

The same rules run on the server after the store query and on the client when
it falls back to bundled data, so both paths narrow a listing identically.
Records may be mappings or objects exposing ``title``, ``description`` and
``tags``.
"""

from typing import Any, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def normalize_search(search: Optional[str]) -> Optional[str]:
    """Return the trimmed search term, or None when it carries no filter."""
    if search is None:
        return None
    term = search.strip()
    return term or None


def parse_tag_param(tags: Optional[str]) -> List[str]:
    """Split a comma-separated ``tags`` query value, dropping empty entries."""
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def matches_tags(record: Any, selected: Sequence[str]) -> bool:
    """OR semantics: at least one selected tag is present on the record."""
    if not selected:
        return True
    record_tags = _field(record, "tags") or []
    return any(tag in record_tags for tag in selected)


def matches_search(record: Any, term: Optional[str]) -> bool:
    """Case-insensitive substring match over title, description and tags."""
    if not term:
        return True
    needle = term.lower()
    title = (_field(record, "title") or "").lower()
    description = (_field(record, "description") or "").lower()
    if needle in title or needle in description:
        return True
    return any(needle in str(tag).lower() for tag in (_field(record, "tags") or []))


def filter_prompts(
    records: Iterable[T],
    search: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
) -> List[T]:
    """
    Narrow ``records`` by tag and search term, preserving their order.

    Args:
        records: Prompt records, already ordered.
        search: Raw search text; blank means no search filter.
        tags: Selected tags; empty means no tag filter.

    Returns:
        List of matching records in their original order.
    """
    term = normalize_search(search)
    selected = list(tags or [])
    return [
        record
        for record in records
        if matches_tags(record, selected) and matches_search(record, term)
    ]
