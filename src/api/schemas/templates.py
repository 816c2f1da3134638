"""
Template API schemas.
"""

from typing import List
from pydantic import BaseModel, Field


class TemplateResponse(BaseModel):
    """A story template and the form fields it sets."""

    template_id: str = Field(..., description="Template identifier")
    title: str
    description: str
    details: dict = Field(default_factory=dict, description="Form field values applied by the template")


class TemplateListResponse(BaseModel):
    """Response for template list endpoint."""

    templates: List[TemplateResponse] = Field(default_factory=list)
    total: int
