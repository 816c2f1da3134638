"""
Interfaces of the wizard's external collaborators.

- CharacterDirectory: character entities owned outside the wizard
- DraftStore: persistence of resumable drafts
- GenerationService: opaque book generation backend
"""

from typing import Optional, Protocol
from urllib.parse import parse_qs

from .entities import Character, Draft


class CharacterDirectory(Protocol):
    """Protocol for the character directory."""

    async def list(self, user_id: str) -> list[Character]:
        """Return all characters owned by the user."""
        ...

    async def create(self, user_id: str, fields: dict) -> Character:
        """Create a character and return the stored record."""
        ...

    async def update(self, character_id: str, fields: dict) -> Character:
        """Update a character and return the stored record."""
        ...


class DraftStore(Protocol):
    """Protocol for the draft collaborator."""

    async def create(self, draft: Draft) -> Draft:
        """Store a new draft and return it with its identity."""
        ...

    async def update(self, draft_id: str, draft: Draft) -> Draft:
        """Replace an existing draft."""
        ...

    async def get(self, draft_id: str) -> Draft:
        """
        Fetch a draft by identity.

        Raises:
            DraftNotFoundError: If no draft has this identity
        """
        ...


class GenerationService(Protocol):
    """Protocol for the book generation backend."""

    async def create(self, payload: dict) -> dict:
        """
        Submit a generation request.

        Returns:
            Response body containing at least the generated book "id"
        """
        ...


CHARACTER_PARAMS = ("character", "characterId")
DRAFT_PARAMS = ("draft", "draftId")


def parse_deep_link(query: str) -> tuple[Optional[str], Optional[str]]:
    """
    Extract the preselected character and draft identities from a query string.

    Args:
        query: Page query string, with or without the leading "?"

    Returns:
        (character_id, draft_id), either may be None
    """
    params = parse_qs(query.lstrip("?"))

    def first(names: tuple[str, ...]) -> Optional[str]:
        for name in names:
            values = params.get(name)
            if values and values[0]:
                return values[0]
        return None

    return first(CHARACTER_PARAMS), first(DRAFT_PARAMS)
