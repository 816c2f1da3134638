"""
Characters router.

Endpoints under /characters for the acting user's character directory.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from src.storage.adapters import AGED_CATEGORIES, CharacterDirectoryAdapter
from src.storage.persistence import PersistenceAdapter
from src.wizard.entities import Character, CharacterCategory
from src.wizard.errors import WizardValidationError

from ..dependencies.auth import get_current_user_id
from ..schemas.characters import (
    CharacterCreateRequest,
    CharacterUpdateRequest,
    CharacterResponse,
    CharacterListResponse,
)
from .._storage_state import get_persistence

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(character: Character) -> CharacterResponse:
    return CharacterResponse(**character.to_dict())


def _get_owned_character(persistence: PersistenceAdapter, character_id: str, user_id: str) -> Character:
    character = persistence.get_character(character_id)
    if character is None:
        raise HTTPException(status_code=404, detail=f"Character not found: {character_id}")
    if character.owner_id != user_id:
        raise HTTPException(status_code=403, detail="Character belongs to another user")
    return character


@router.get("", response_model=CharacterListResponse)
async def list_characters(
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """List the acting user's characters, oldest first."""
    try:
        characters = persistence.list_characters(user_id)
    except Exception as e:
        logger.error(f"[CharacterAPI] List error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to list characters: {e}")

    return CharacterListResponse(
        characters=[_to_response(c) for c in characters],
        total=len(characters),
    )


@router.get("/{character_id}", response_model=CharacterResponse)
async def get_character(
    character_id: str,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    return _to_response(_get_owned_character(persistence, character_id, user_id))


@router.post("", response_model=CharacterResponse, status_code=201)
async def create_character(
    request: CharacterCreateRequest,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """
    Create a character for the acting user.

    Age is dropped for categories other than child and adult.
    """
    directory = CharacterDirectoryAdapter(persistence)
    try:
        character = await directory.create(user_id, request.model_dump(mode="json", exclude_none=True))
    except WizardValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"[CharacterAPI] Create error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to create character: {e}")

    return _to_response(character)


@router.patch("/{character_id}", response_model=CharacterResponse)
async def update_character(
    character_id: str,
    request: CharacterUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    persistence: PersistenceAdapter = Depends(get_persistence),
):
    """Update the given fields of a character owned by the acting user."""
    existing = _get_owned_character(persistence, character_id, user_id)

    fields = request.model_dump(mode="json", exclude_unset=True)
    category = CharacterCategory(fields.get("category") or existing.category)
    if category not in AGED_CATEGORIES:
        fields["age"] = None

    directory = CharacterDirectoryAdapter(persistence)
    try:
        character = await directory.update(character_id, fields)
    except Exception as e:
        logger.error(f"[CharacterAPI] Update error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to update character: {e}")

    return _to_response(character)
