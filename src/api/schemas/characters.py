"""
Character API schemas.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from src.wizard.entities import CharacterCategory


class CharacterCreateRequest(BaseModel):
    """Request to create a character."""

    name: str = Field(..., min_length=2, max_length=100, description="Character name")
    category: CharacterCategory = Field(
        default=CharacterCategory.CHILD,
        description="Character category",
    )
    age: Optional[int] = Field(
        default=None, ge=0, le=150,
        description="Age (only kept for child and adult characters)",
    )
    avatar_url: Optional[str] = Field(default=None, description="Portrait reference")
    gender: Optional[str] = None
    physical_description: Optional[str] = None
    personality: Optional[str] = None
    likes: Optional[str] = None
    dislikes: Optional[str] = None
    interests: Optional[str] = None


class CharacterUpdateRequest(BaseModel):
    """Request to update a character. Omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    category: Optional[CharacterCategory] = None
    age: Optional[int] = Field(default=None, ge=0, le=150)
    avatar_url: Optional[str] = None
    gender: Optional[str] = None
    physical_description: Optional[str] = None
    personality: Optional[str] = None
    likes: Optional[str] = None
    dislikes: Optional[str] = None
    interests: Optional[str] = None


class CharacterResponse(BaseModel):
    """Response representing a Character."""

    character_id: str = Field(..., description="Unique character identifier")
    owner_id: Optional[str] = Field(default=None, description="Owning user")
    name: str
    category: CharacterCategory
    age: Optional[int] = None
    avatar_url: Optional[str] = None
    gender: Optional[str] = None
    physical_description: Optional[str] = None
    personality: Optional[str] = None
    likes: Optional[str] = None
    dislikes: Optional[str] = None
    interests: Optional[str] = None
    created_at: str
    updated_at: str


class CharacterListResponse(BaseModel):
    """Response for character list endpoint."""

    characters: List[CharacterResponse] = Field(default_factory=list)
    total: int = Field(..., description="Number of characters")
