"""
Drafts router.

Endpoints under /drafts for the acting user's resumable wizard drafts.
A draft is only visible to the user who owns it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from src.storage.persistence import PersistenceAdapter
from src.wizard.drafts import DEFAULT_DRAFT_TITLE, DRAFT_STATUS
from src.wizard.entities import CharacterStoryDetail, Draft, now_iso
from src.wizard.errors import DraftNotFoundError

from ..dependencies.auth import get_current_user_id
from ..schemas.drafts import (
    DraftWriteRequest,
    DraftResponse,
    DraftListResponse,
    DraftDeleteResponse,
)
from .._storage_state import get_persistence

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(draft: Draft) -> DraftResponse:
    return DraftResponse(**draft.to_dict())


def _from_request(request: DraftWriteRequest, user_id: str) -> Draft:
    return Draft(
        user_id=user_id,
        title=request.title or DEFAULT_DRAFT_TITLE,
        current_step=request.current_step,
        progress=request.progress,
        step1_completed=request.step1_completed,
        step2_completed=request.step2_completed,
        step3_completed=request.step3_completed,
        status=DRAFT_STATUS,
        character_ids=list(request.character_ids),
        character_details={
            cid: CharacterStoryDetail.from_dict(detail.model_dump(mode="json"))
            for cid, detail in request.character_details.items()
        },
        form_state=dict(request.form_state),
        updated_at=now_iso(),
    )


def _get_owned_draft(persistence: PersistenceAdapter, draft_id: str, user_id: str) -> Draft:
    draft = persistence.get_draft(draft_id)
    if draft is None:
        raise HTTPException(status_code=404, detail=f"Draft not found: {draft_id}")
    if draft.user_id != user_id:
        raise HTTPException(status_code=403, detail="Draft belongs to another user")
    return draft


@router.get("", response_model=DraftListResponse)
async def list_drafts(
    limit: int = Query(default=100, ge=1, le=500, description="Maximum drafts to return"),
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """List the acting user's drafts, most recently updated first."""
    try:
        drafts = persistence.list_drafts(user_id, limit=limit)
    except Exception as e:
        logger.error(f"[DraftAPI] List error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to list drafts: {e}")

    return DraftListResponse(
        drafts=[_to_response(d) for d in drafts],
        total=len(drafts),
    )


@router.get("/{draft_id}", response_model=DraftResponse)
async def get_draft(
    draft_id: str,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """Get a single draft owned by the acting user."""
    return _to_response(_get_owned_draft(persistence, draft_id, user_id))


@router.post("", response_model=DraftResponse, status_code=201)
async def create_draft(
    request: DraftWriteRequest,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """
    Create a draft for the acting user.

    The stored owner is always the acting user.
    """
    try:
        draft = persistence.create_draft(_from_request(request, user_id))
    except Exception as e:
        logger.error(f"[DraftAPI] Create error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to create draft: {e}")

    logger.info(f"[DraftAPI] Created draft {draft.draft_id} for user {user_id}")
    return _to_response(draft)


@router.put("/{draft_id}", response_model=DraftResponse)
async def update_draft(
    draft_id: str,
    request: DraftWriteRequest,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """Replace the content of a draft owned by the acting user."""
    _get_owned_draft(persistence, draft_id, user_id)

    try:
        draft = persistence.update_draft(draft_id, _from_request(request, user_id))
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail=f"Draft not found: {draft_id}")
    except Exception as e:
        logger.error(f"[DraftAPI] Update error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to update draft: {e}")

    return _to_response(draft)


@router.delete("/{draft_id}", response_model=DraftDeleteResponse)
async def delete_draft(
    draft_id: str,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """Delete a draft owned by the acting user."""
    _get_owned_draft(persistence, draft_id, user_id)

    try:
        persistence.delete_draft(draft_id)
    except DraftNotFoundError:
        raise HTTPException(status_code=404, detail=f"Draft not found: {draft_id}")

    logger.info(f"[DraftAPI] Deleted draft {draft_id}")
    return DraftDeleteResponse(draft_id=draft_id, success=True, message="Draft deleted")
