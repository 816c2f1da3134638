"""
Wizard-specific exceptions.

All of them are local to a wizard session; none should terminate the
hosting application.
"""

from typing import Optional


class WizardError(Exception):
    """Base exception for all wizard errors."""
    pass


class WizardValidationError(WizardError):
    """
    Raised when form or selection values violate wizard invariants.

    Examples:
    - Advancing past step 1 with no character selected
    - Page count outside [10, 40] at submission
    - More than 3 tones or genres
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidTransitionError(WizardError):
    """Raised when a step transition is not allowed from the current state."""

    def __init__(self, from_state: str, to_state: Optional[str] = None, reason: Optional[str] = None):
        self.from_state = from_state
        self.to_state = to_state
        detail = f"Cannot leave {from_state}"
        if to_state:
            detail = f"Cannot transition {from_state} -> {to_state}"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class CharacterNotFoundError(WizardError):
    """Raised when a character is not present in the directory."""

    def __init__(self, character_id: str):
        self.character_id = character_id
        super().__init__(f"Character not found: {character_id}")


class TemplateNotFoundError(WizardError):
    """Raised when a requested story template does not exist."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class DraftNotFoundError(WizardError):
    """Raised when a requested draft does not exist."""

    def __init__(self, draft_id: str):
        self.draft_id = draft_id
        super().__init__(f"Draft not found: {draft_id}")


class DraftOwnershipError(WizardError):
    """Raised when a user accesses a draft owned by someone else."""

    def __init__(self, draft_id: str, user_id: str):
        self.draft_id = draft_id
        self.user_id = user_id
        super().__init__(f"Draft {draft_id} does not belong to user {user_id}")


class DraftPersistenceError(WizardError):
    """Raised when a draft cannot be written to or read from storage."""
    pass


class SubmissionError(WizardError):
    """
    Raised when the generation request fails.

    No partially generated book is assumed to exist afterwards.
    """
    pass
