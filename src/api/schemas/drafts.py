"""
Draft API schemas.

Supports /drafts CRUD endpoints.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from src.wizard.entities import CharacterRole, MAX_SELECTED_CHARACTERS


class CharacterDetailSchema(BaseModel):
    """Story-specific details of one selected character."""

    role: Optional[CharacterRole] = Field(default=None, description="Role in the story")
    specific_traits: List[str] = Field(default_factory=list, description="Traits for this story")
    story_background: str = Field(default="", description="Background in this story")
    special_abilities: List[str] = Field(default_factory=list, description="Special abilities")
    custom_description: str = Field(default="", description="Free-form description")


class DraftWriteRequest(BaseModel):
    """Request to create or replace a draft."""

    title: str = Field(default="", description="Book title (empty = untitled)")
    current_step: int = Field(default=1, ge=1, le=3, description="Wizard step to resume at")
    progress: int = Field(default=0, ge=0, le=100, description="Completion percentage")
    step1_completed: bool = False
    step2_completed: bool = False
    step3_completed: bool = False
    character_ids: List[str] = Field(
        default_factory=list,
        max_length=MAX_SELECTED_CHARACTERS,
        description="Ordered selection; the first entry is the primary character",
    )
    character_details: Dict[str, CharacterDetailSchema] = Field(
        default_factory=dict,
        description="Story details keyed by character ID",
    )
    form_state: dict = Field(default_factory=dict, description="Stored wizard form fields")


class DraftResponse(BaseModel):
    """Response representing a Draft."""

    draft_id: str = Field(..., description="Unique draft identifier")
    user_id: str = Field(..., description="Owning user")
    title: str
    current_step: int
    progress: int
    step1_completed: bool
    step2_completed: bool
    step3_completed: bool
    status: str = Field(default="draft", description="Draft status")
    character_ids: List[str] = Field(default_factory=list)
    character_details: Dict[str, CharacterDetailSchema] = Field(default_factory=dict)
    form_state: dict = Field(default_factory=dict)
    created_at: str = Field(..., description="Creation timestamp (ISO format)")
    updated_at: str = Field(..., description="Last update timestamp (ISO format)")


class DraftListResponse(BaseModel):
    """Response for draft list endpoint."""

    drafts: List[DraftResponse] = Field(default_factory=list)
    total: int = Field(..., description="Number of drafts returned")


class DraftDeleteResponse(BaseModel):
    """Response from draft deletion."""

    draft_id: str
    success: bool
    message: Optional[str] = None
