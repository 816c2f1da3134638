"""
Generation Request Orchestrator.

Assembles the final payload (form state + extended characters) and issues
exactly one generation request. There is no automatic retry; a failed
submission has to be started again by the user.
"""

import logging
from typing import Optional

from .entities import (
    Character,
    CharacterStoryDetail,
    GenerationResult,
    WizardFormState,
)
from .errors import CharacterNotFoundError, SubmissionError
from .ports import GenerationService
from .reconciliation import FormReconciler
from .steps import StepController

logger = logging.getLogger("storybook_wizard")


def build_extended_characters(
    character_ids: list[str],
    directory: dict[str, Character],
    details: dict[str, CharacterStoryDetail],
) -> list[dict]:
    """
    Join each selected character's directory record with its story details.

    Raises:
        CharacterNotFoundError: If a selected character is not in the directory
    """
    extended = []
    for character_id in character_ids:
        character = directory.get(character_id)
        if character is None:
            raise CharacterNotFoundError(character_id)
        detail = details.get(character_id) or CharacterStoryDetail()
        entry = character.to_dict()
        entry["details"] = detail.to_dict()
        extended.append(entry)
    return extended


def build_payload(
    form_state: WizardFormState,
    directory: dict[str, Character],
    details: dict[str, CharacterStoryDetail],
) -> dict:
    payload = form_state.to_dict()
    payload["extended_characters"] = build_extended_characters(
        form_state.character_ids, directory, details
    )
    return payload


class GenerationOrchestrator:
    """
    Sends the validated wizard state to the generation service.

    Drives the step controller: TECHNICAL_SETTINGS -> GENERATING before the
    request, then DONE on success or back to TECHNICAL_SETTINGS on failure.
    """

    def __init__(self, service: GenerationService):
        self.service = service
        self.last_result: Optional[GenerationResult] = None

    async def submit(
        self,
        reconciler: FormReconciler,
        directory: dict[str, Character],
        steps: StepController,
    ) -> GenerationResult:
        """
        Validate, build the payload and issue the single creation request.

        Raises:
            WizardValidationError: If the form violates an invariant
            CharacterNotFoundError: If a selected character left the directory
            InvalidTransitionError: If not on step 3 (or already generating)
            SubmissionError: If the request fails or returns no identity
        """
        form_state = reconciler.ensure_valid()
        payload = build_payload(form_state, directory, reconciler.store.details)

        steps.begin_generation()
        logger.info(
            f"[Generation] Submitting book request with "
            f"{len(payload['extended_characters'])} characters"
        )

        try:
            response = await self.service.create(payload)
            book_id = (response or {}).get("id")
            if book_id is None:
                raise SubmissionError("Generation service returned no book id")
        except Exception as e:
            steps.fail_generation()
            logger.error(f"[Generation] Request failed: {e}", exc_info=True)
            if isinstance(e, SubmissionError):
                raise
            raise SubmissionError(f"Generation request failed: {e}") from e

        steps.finish_generation()
        self.last_result = GenerationResult(book_id=str(book_id), response=dict(response))
        logger.info(f"[Generation] Book {book_id} accepted")
        return self.last_result
