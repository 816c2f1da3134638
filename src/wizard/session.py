"""
Wizard Session.

Aggregate that owns every component of one book-creation session:
- RoleDetailStore (selection and story details)
- FormReconciler (canonical form state)
- StepController (current step and panels)
- DraftPersistenceService (drafts and autosave)
- GenerationOrchestrator (final request)
- NoticeBoard (user-visible notices)

Usage:
    async with WizardSession(user_id, directory, drafts, generation,
                             preselected_character_id="42") as session:
        session.select_character("7")
        await session.advance()
        ...
        await session.submit()

Entering the context mounts the session (deep-link draft load, directory
fetch, preselection, autosave start); leaving it tears the session down and
always cancels the autosave task.
"""

import asyncio
import logging
from typing import Any, Optional

from src.infra.settings import WizardSettings

from .drafts import DraftPersistenceService, Sleeper
from .entities import (
    Character,
    CharacterStoryDetail,
    Draft,
    GenerationResult,
    WizardSnapshot,
    WizardState,
)
from .errors import (
    CharacterNotFoundError,
    InvalidTransitionError,
    SubmissionError,
    WizardError,
    WizardValidationError,
)
from .notices import NoticeBoard
from .orchestrator import GenerationOrchestrator
from .ports import CharacterDirectory, DraftStore, GenerationService
from .reconciliation import FormReconciler, PreselectionStatus
from .roles import RoleDetailStore
from .steps import CloseOutcome, StepController, Transition

logger = logging.getLogger("storybook_wizard")


class WizardSession:
    """One book-creation wizard session."""

    def __init__(
        self,
        user_id: Optional[str],
        directory: CharacterDirectory,
        draft_store: DraftStore,
        generation: GenerationService,
        preselected_character_id: Optional[str] = None,
        draft_id: Optional[str] = None,
        settings: Optional[WizardSettings] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        """
        Args:
            user_id: Authenticated actor, None for anonymous sessions
            directory: Character directory adapter
            draft_store: Draft collaborator
            generation: Generation service
            preselected_character_id: Deep-link character parameter
            draft_id: Deep-link draft parameter
            settings: Autosave configuration (defaults when omitted)
            sleep: Coroutine driving the autosave timer
        """
        settings = settings or WizardSettings()
        self.user_id = user_id
        self.directory = directory
        self.notices = NoticeBoard()
        self.store = RoleDetailStore(self.notices)
        self.reconciler = FormReconciler(self.store)
        self.steps = StepController(lambda: self.store.count)
        self.drafts = DraftPersistenceService(
            draft_store,
            user_id,
            autosave_interval=settings.autosave_interval,
            autosave_enabled=settings.autosave_enabled,
            sleep=sleep,
        )
        self.orchestrator = GenerationOrchestrator(generation)

        self._preselected_character_id = preselected_character_id
        self._deep_link_draft_id = draft_id
        self._characters: dict[str, Character] = {}
        self._directory_loaded = False
        self._mounted = False
        self._closed = False

    async def __aenter__(self) -> "WizardSession":
        await self.mount()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def state(self) -> WizardState:
        return self.steps.state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def characters(self) -> list[Character]:
        return list(self._characters.values())

    @property
    def directory_loaded(self) -> bool:
        return self._directory_loaded

    @property
    def generated_book_id(self) -> Optional[str]:
        result = self.orchestrator.last_result
        return result.book_id if result else None

    async def mount(self) -> None:
        """Open step 1 and consume the deep-link parameters exactly once."""
        if self._mounted:
            return
        self._mounted = True

        self.steps.open()
        self.reconciler.request_preselection(self._preselected_character_id)

        if self._deep_link_draft_id:
            await self.load_draft(self._deep_link_draft_id)

        await self.refresh_directory()
        await self.drafts.start_autosave(self.snapshot)
        logger.info(f"[Wizard] Session mounted for user {self.user_id}")

    async def teardown(self) -> None:
        """Cancel the autosave task and drop session-scoped data."""
        if self._closed:
            return
        self._closed = True
        await self.drafts.stop_autosave()
        self.store.clear()
        logger.info(f"[Wizard] Session closed (state={self.steps.state.value})")

    async def refresh_directory(self) -> bool:
        """
        Fetch the user's characters and re-check a pending preselection.

        A failed fetch keeps the preselection pending instead of declaring
        the character missing.
        """
        if self.user_id is None:
            characters: list[Character] = []
        else:
            try:
                characters = await self.directory.list(self.user_id)
            except Exception as e:
                logger.error(f"[Wizard] Character directory fetch failed: {e}", exc_info=True)
                self.notices.error("Characters unavailable", "We could not load your characters.")
                return False

        self._characters = {c.character_id: c for c in characters}
        self._directory_loaded = True
        self._resolve_preselection()
        return True

    def snapshot(self) -> WizardSnapshot:
        return WizardSnapshot(
            state=self.steps.state,
            character_ids=self.store.selected_ids,
            character_details=self.store.details,
            form_state=self.reconciler.form_state,
            user_id=self.user_id,
        )

    # =========================================================================
    # Step 1: characters
    # =========================================================================

    def select_character(self, character_id: str) -> bool:
        self._require_character(character_id)
        return self.store.select(character_id)

    def deselect_character(self, character_id: str) -> bool:
        return self.store.deselect(character_id)

    def set_character_detail(self, character_id: str, detail: CharacterStoryDetail) -> None:
        self._require_character(character_id)
        self.store.set_detail(character_id, detail)

    async def create_character(self, fields: dict) -> Optional[Character]:
        """
        Create a character through the directory and select it.

        The new character gets no automatic role.
        """
        try:
            character = await self.directory.create(self.user_id, fields)
        except Exception as e:
            logger.error(f"[Wizard] Character creation failed: {e}", exc_info=True)
            self.notices.error("Error", "There was a problem creating the character. Please try again.")
            return None

        self._characters[character.character_id] = character
        if self.store.select(character.character_id):
            self.notices.info("Character added", f'"{character.name}" was added to your selection.')
        return character

    # =========================================================================
    # Step 2 / 3: form
    # =========================================================================

    def apply_template(self, template_id: str) -> list[str]:
        return self.reconciler.apply_template(template_id)

    def set_field(self, name: str, value: Any) -> None:
        self.reconciler.set_field(name, value)

    def adjust_page_count(self, delta: int) -> int:
        return self.reconciler.adjust_page_count(delta)

    # =========================================================================
    # Navigation
    # =========================================================================

    async def advance(self) -> Optional[Transition]:
        return await self._navigate(self.steps.advance)

    async def previous(self) -> Optional[Transition]:
        return await self._navigate(self.steps.previous)

    async def go_to(self, step: int) -> Optional[Transition]:
        return await self._navigate(lambda: self.steps.go_to(step))

    async def close_panel(self) -> CloseOutcome:
        """Close the visible panel; closing an empty step 1 ends the session."""
        outcome = self.steps.close_panel()
        if outcome == CloseOutcome.ABANDONED:
            await self.teardown()
        return outcome

    # =========================================================================
    # Drafts
    # =========================================================================

    async def save_draft(self) -> Optional[Draft]:
        """Explicit save requested by the user."""
        return await self.drafts.save_manual(self.snapshot(), self.notices)

    async def load_draft(self, draft_id: str) -> bool:
        """
        Load a draft and replace the in-memory session state with it.

        The draft is checked in full before anything is applied, so a
        failed load leaves selection, form, step and draft identity as they
        were. Failures are reported as notices.
        """
        if self.steps.is_locked:
            self.notices.error("Generation in progress", "Drafts cannot be loaded right now.")
            return False

        try:
            draft = await self.drafts.load(draft_id)
            self.store.check_selection(draft.character_ids)
            WizardState.for_step(draft.current_step)
            self.reconciler.check_draft(draft.form_state)
        except (WizardError, ValueError) as e:
            logger.error(f"[Wizard] Draft {draft_id} could not be loaded: {e}")
            self.notices.error("Draft not loaded", "We could not open this draft.")
            return False

        self.store.restore(draft.character_ids, draft.character_details)
        self.reconciler.apply_draft(draft.form_state)
        self.steps.restore(draft.current_step)
        self.drafts.adopt(draft)
        self.notices.info("Draft loaded", f'Continuing "{draft.title}" at step {draft.current_step}.')
        return True

    # =========================================================================
    # Submission
    # =========================================================================

    async def submit(self) -> Optional[GenerationResult]:
        """Start book generation from step 3."""
        if self.steps.is_locked:
            self.notices.info("Generation in progress", "Your book is already being generated.")
            return None

        try:
            result = await self.orchestrator.submit(self.reconciler, self._characters, self.steps)
        except WizardValidationError as e:
            self.notices.error("Check your book settings", e.message)
            return None
        except CharacterNotFoundError as e:
            self.notices.error("Character unavailable", str(e))
            return None
        except SubmissionError:
            self.notices.error("Error", "There was a problem creating the book. Please try again.")
            return None
        except InvalidTransitionError as e:
            logger.warning(f"[Wizard] Submission refused: {e}")
            self.notices.error("Finish your book settings", "Books are submitted from the technical settings step.")
            return None

        await self.drafts.stop_autosave()
        return result

    # =========================================================================
    # Internal
    # =========================================================================

    async def _navigate(self, move) -> Optional[Transition]:
        try:
            transition = move()
        except WizardValidationError as e:
            self.notices.error("Select a character", e.message)
            return None
        except (InvalidTransitionError, ValueError) as e:
            logger.warning(f"[Wizard] Navigation refused: {e}")
            self.notices.error("Step not available", str(e))
            return None

        if transition.save_due and self.user_id:
            await self.drafts.save_manual(self.snapshot(), self.notices)
        return transition

    def _resolve_preselection(self) -> PreselectionStatus:
        return self.reconciler.resolve_preselection(
            self._directory_loaded,
            lambda character_id: character_id in self._characters,
        )

    def _require_character(self, character_id: str) -> None:
        if character_id not in self._characters:
            raise CharacterNotFoundError(character_id)
