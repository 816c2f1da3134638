"""
Templates router.

Read-only access to the built-in story templates.
"""

from fastapi import APIRouter, HTTPException

from src.wizard import templates
from src.wizard.entities import Template
from src.wizard.errors import TemplateNotFoundError

from ..schemas.templates import TemplateResponse, TemplateListResponse

router = APIRouter()


def _to_response(template: Template) -> TemplateResponse:
    return TemplateResponse(
        template_id=template.template_id,
        title=template.title,
        description=template.description,
        details=templates.details(template.template_id),
    )


@router.get("", response_model=TemplateListResponse)
async def list_templates():
    """List all story templates, "custom" first."""
    items = [_to_response(t) for t in templates.list_templates()]
    return TemplateListResponse(templates=items, total=len(items))


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: str):
    try:
        template = templates.get_template(template_id)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail=f"Template not found: {template_id}")
    return _to_response(template)
