"""
Async adapters exposing the SQLite store through the wizard's ports.

SQLite calls are blocking, so each operation runs in the default executor.
"""

import asyncio
import logging
from typing import Optional

from src.wizard.entities import Character, CharacterCategory, Draft
from src.wizard.errors import DraftNotFoundError, WizardValidationError

from .persistence import CHARACTER_UPDATABLE_FIELDS, PersistenceAdapter

logger = logging.getLogger("storybook_wizard")

MIN_NAME_LENGTH = 2
AGED_CATEGORIES = (CharacterCategory.CHILD, CharacterCategory.ADULT)


class CharacterDirectoryAdapter:
    """CharacterDirectory backed by the persistence adapter."""

    def __init__(self, persistence: PersistenceAdapter):
        self.persistence = persistence

    async def list(self, user_id: str) -> list[Character]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.persistence.list_characters, str(user_id))

    async def create(self, user_id: Optional[str], fields: dict) -> Character:
        """
        Create a character owned by the user.

        Raises:
            WizardValidationError: If the name or category is invalid
        """
        name = (fields.get("name") or "").strip()
        if len(name) < MIN_NAME_LENGTH:
            raise WizardValidationError("name", f"must be at least {MIN_NAME_LENGTH} characters")

        try:
            category = CharacterCategory(fields.get("category") or CharacterCategory.CHILD)
        except ValueError:
            raise WizardValidationError("category", f"unknown category: {fields.get('category')}") from None

        attributes = {
            k: v for k, v in fields.items()
            if k in CHARACTER_UPDATABLE_FIELDS and k not in ("name", "category")
        }
        # Age only applies to people
        if category not in AGED_CATEGORIES:
            attributes.pop("age", None)

        character = Character.create(
            name,
            category=category,
            owner_id=str(user_id) if user_id is not None else None,
            **attributes,
        )
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.persistence.create_character, character)
        logger.info(f"[Characters] Created {character.character_id} for user {user_id}")
        return character

    async def update(self, character_id: str, fields: dict) -> Character:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, self.persistence.update_character, character_id, fields
        )


class DraftRepository:
    """DraftStore backed by the persistence adapter."""

    def __init__(self, persistence: PersistenceAdapter):
        self.persistence = persistence

    async def create(self, draft: Draft) -> Draft:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.persistence.create_draft, draft)

    async def update(self, draft_id: str, draft: Draft) -> Draft:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.persistence.update_draft, draft_id, draft)

    async def get(self, draft_id: str) -> Draft:
        loop = asyncio.get_running_loop()
        draft = await loop.run_in_executor(None, self.persistence.get_draft, draft_id)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        return draft
