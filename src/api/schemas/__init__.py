"""
API Schemas package.

Pydantic models for request/response validation.
"""

from .drafts import (
    CharacterDetailSchema,
    DraftWriteRequest,
    DraftResponse,
    DraftListResponse,
    DraftDeleteResponse,
)
from .characters import (
    CharacterCreateRequest,
    CharacterUpdateRequest,
    CharacterResponse,
    CharacterListResponse,
)
from .templates import (
    TemplateResponse,
    TemplateListResponse,
)

__all__ = [
    "CharacterDetailSchema",
    "DraftWriteRequest",
    "DraftResponse",
    "DraftListResponse",
    "DraftDeleteResponse",
    "CharacterCreateRequest",
    "CharacterUpdateRequest",
    "CharacterResponse",
    "CharacterListResponse",
    "TemplateResponse",
    "TemplateListResponse",
]
