"""
Storybook Creation Wizard Core Module.

Three-step guided workflow for assembling a personalised children's book:
- Step 1: character selection and story roles
- Step 2: story customisation (templates or manual edits)
- Step 3: technical settings, then a single generation request

Drafts are checkpointed on every step transition and by a background
autosave task owned by the session.
"""

from .entities import (
    BookFormat,
    Character,
    CharacterCategory,
    CharacterRole,
    CharacterStoryDetail,
    Draft,
    GenerationResult,
    Template,
    WizardFormState,
    WizardSnapshot,
    WizardState,
)
from .errors import (
    WizardError,
    WizardValidationError,
    InvalidTransitionError,
    CharacterNotFoundError,
    TemplateNotFoundError,
    DraftNotFoundError,
    DraftOwnershipError,
    DraftPersistenceError,
    SubmissionError,
)
from .notices import Notice, NoticeBoard, NoticeLevel
from .ports import CharacterDirectory, DraftStore, GenerationService, parse_deep_link
from .roles import RoleDetailStore
from .steps import CloseOutcome, StepController, Transition
from .reconciliation import FieldSource, FormReconciler, PreselectionStatus
from .drafts import AutosaveTask, DraftPersistenceService
from .orchestrator import GenerationOrchestrator, build_payload
from .session import WizardSession

__all__ = [
    # Entities
    "BookFormat",
    "Character",
    "CharacterCategory",
    "CharacterRole",
    "CharacterStoryDetail",
    "Draft",
    "GenerationResult",
    "Template",
    "WizardFormState",
    "WizardSnapshot",
    "WizardState",
    # Errors
    "WizardError",
    "WizardValidationError",
    "InvalidTransitionError",
    "CharacterNotFoundError",
    "TemplateNotFoundError",
    "DraftNotFoundError",
    "DraftOwnershipError",
    "DraftPersistenceError",
    "SubmissionError",
    # Notices
    "Notice",
    "NoticeBoard",
    "NoticeLevel",
    # Ports
    "CharacterDirectory",
    "DraftStore",
    "GenerationService",
    "parse_deep_link",
    # Roles
    "RoleDetailStore",
    # Steps
    "CloseOutcome",
    "StepController",
    "Transition",
    # Reconciliation
    "FieldSource",
    "FormReconciler",
    "PreselectionStatus",
    # Drafts
    "AutosaveTask",
    "DraftPersistenceService",
    # Orchestrator
    "GenerationOrchestrator",
    "build_payload",
    # Session
    "WizardSession",
]
