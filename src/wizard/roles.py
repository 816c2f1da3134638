"""
Role/Detail Store.

Session-scoped selection list and per-character story details.

Rules:
- At most MAX_SELECTED_CHARACTERS characters are selected; extra selections
  are ignored with a "maximum reached" notice
- Deselecting keeps the detail record so re-selecting restores it
- set_detail replaces a record, it never merges
- Only a deep-link preselection gets an automatic protagonist role
"""

import logging
from typing import Optional

from .entities import (
    CharacterRole,
    CharacterStoryDetail,
    MAX_SELECTED_CHARACTERS,
)
from .errors import WizardValidationError
from .notices import NoticeBoard

logger = logging.getLogger("storybook_wizard")

PRESELECTED_TRAITS = ("Brave", "Curious")


class RoleDetailStore:
    """Ordered character selection plus the story detail map."""

    def __init__(self, notices: Optional[NoticeBoard] = None):
        self.notices = notices or NoticeBoard()
        self._selected: list[str] = []
        self._details: dict[str, CharacterStoryDetail] = {}
        self._protagonist_preselected = False

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selected)

    @property
    def details(self) -> dict[str, CharacterStoryDetail]:
        return dict(self._details)

    @property
    def count(self) -> int:
        return len(self._selected)

    def is_selected(self, character_id: str) -> bool:
        return character_id in self._selected

    def get_detail(self, character_id: str) -> Optional[CharacterStoryDetail]:
        return self._details.get(character_id)

    # =========================================================================
    # Selection
    # =========================================================================

    def select(self, character_id: str) -> bool:
        """
        Append a character to the selection.

        Returns:
            True if the selection changed
        """
        if character_id in self._selected:
            return False

        if len(self._selected) >= MAX_SELECTED_CHARACTERS:
            self.notices.info(
                "Maximum reached",
                f"You can select up to {MAX_SELECTED_CHARACTERS} characters per book.",
            )
            return False

        self._selected.append(character_id)
        self.ensure_default(character_id)
        logger.debug(f"[Roles] Selected {character_id} ({len(self._selected)} total)")
        return True

    def deselect(self, character_id: str) -> bool:
        """Remove a character from the selection, keeping its detail record."""
        if character_id not in self._selected:
            return False
        self._selected.remove(character_id)
        logger.debug(f"[Roles] Deselected {character_id} ({len(self._selected)} total)")
        return True

    @staticmethod
    def check_selection(character_ids: list[str]) -> None:
        if len(dict.fromkeys(character_ids)) > MAX_SELECTED_CHARACTERS:
            raise WizardValidationError(
                "character_ids",
                f"at most {MAX_SELECTED_CHARACTERS} characters can be selected",
            )

    def reset_selection(self, character_ids: list[str]) -> None:
        """Replace the whole selection."""
        self.check_selection(character_ids)
        self._selected = list(dict.fromkeys(character_ids))

    # =========================================================================
    # Details
    # =========================================================================

    def set_detail(self, character_id: str, detail: CharacterStoryDetail) -> None:
        """Replace the detail record of a character."""
        if not isinstance(detail, CharacterStoryDetail):
            raise WizardValidationError(
                "detail", "a complete CharacterStoryDetail is required"
            )
        self._details[character_id] = detail

    def ensure_default(self, character_id: str, preselected: bool = False) -> CharacterStoryDetail:
        """
        Create the detail record for a character if it has none.

        The first deep-link preselection becomes the protagonist; every other
        character starts without a role.
        """
        existing = self._details.get(character_id)
        if existing is not None:
            return existing

        if preselected and not self._protagonist_preselected:
            detail = CharacterStoryDetail(
                role=CharacterRole.PROTAGONIST,
                specific_traits=list(PRESELECTED_TRAITS),
            )
            self._protagonist_preselected = True
            logger.info(f"[Roles] Preselected {character_id} as protagonist")
        else:
            detail = CharacterStoryDetail()

        self._details[character_id] = detail
        return detail

    def restore(self, character_ids: list[str], details: dict[str, CharacterStoryDetail]) -> None:
        """Replace selection and details wholesale (draft load)."""
        self.reset_selection(character_ids)
        self._details = dict(details)
        for character_id in self._selected:
            self.ensure_default(character_id)

    def clear(self) -> None:
        """Drop all session data."""
        self._selected = []
        self._details = {}
        self._protagonist_preselected = False
