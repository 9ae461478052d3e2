"""Closed set of prompt categories."""

from typing import Literal, Tuple

PromptCategory = Literal["image", "video", "text", "code", "automation"]

CATEGORIES: Tuple[str, ...] = ("image", "video", "text", "code", "automation")
DEFAULT_CATEGORY = "text"


def is_valid_category(value: object) -> bool:
    return isinstance(value, str) and value in CATEGORIES
