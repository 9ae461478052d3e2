"""
Models package for the prompt service.

This package contains the SQLAlchemy ORM model and Pydantic DTOs.
"""

# Ensure the ORM model is registered with the Base metadata when this package is imported.
from . import base
from . import prompt_orm

from .base import Base
from .prompt_orm import PromptORM, decode_tags, encode_tags

from .dtos import (
    ErrorResponse,
    HealthResponse,
    PromptCreate,
    PromptDTO,
    serialize_prompt_list,
)

__all__ = [
    # Base
    "Base",
    # ORMs
    "PromptORM",
    "decode_tags",
    "encode_tags",
    # DTOs
    "ErrorResponse",
    "HealthResponse",
    "PromptCreate",
    "PromptDTO",
    "serialize_prompt_list",
]
