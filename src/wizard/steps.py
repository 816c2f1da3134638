"""
Step Controller (wizard state machine).

Valid transitions:
- CHARACTERS -> STORY_DETAILS (advance; needs >= 1 selected character)
- CHARACTERS -> TECHNICAL_SETTINGS (go_to; same guard)
- STORY_DETAILS -> TECHNICAL_SETTINGS (advance, unconditional)
- STORY_DETAILS -> CHARACTERS (previous)
- TECHNICAL_SETTINGS -> STORY_DETAILS / CHARACTERS (previous / go_to)
- TECHNICAL_SETTINGS -> GENERATING (submit)
- GENERATING -> DONE (generation succeeded)
- GENERATING -> TECHNICAL_SETTINGS (generation failed)

Every successful move between panels except the very first entry into
CHARACTERS reports save_due=True; the session turns that into a draft save.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .entities import WizardState
from .errors import InvalidTransitionError, WizardValidationError

logger = logging.getLogger("storybook_wizard")


ALLOWED_TRANSITIONS: dict[WizardState, frozenset[WizardState]] = {
    WizardState.CHARACTERS: frozenset({
        WizardState.STORY_DETAILS,
        WizardState.TECHNICAL_SETTINGS,
    }),
    WizardState.STORY_DETAILS: frozenset({
        WizardState.CHARACTERS,
        WizardState.TECHNICAL_SETTINGS,
    }),
    WizardState.TECHNICAL_SETTINGS: frozenset({
        WizardState.CHARACTERS,
        WizardState.STORY_DETAILS,
        WizardState.GENERATING,
    }),
    WizardState.GENERATING: frozenset({
        WizardState.DONE,
        WizardState.TECHNICAL_SETTINGS,
    }),
    WizardState.DONE: frozenset(),
}


class CloseOutcome(str, Enum):
    """Result of closing the visible panel."""

    HIDDEN = "HIDDEN"
    ABANDONED = "ABANDONED"
    LOCKED = "LOCKED"


@dataclass(frozen=True)
class Transition:
    """A completed state change."""

    from_state: Optional[WizardState]
    to_state: WizardState
    save_due: bool


class StepController:
    """
    Owns the current step and panel visibility.

    Only one panel is visible at a time. GENERATING has no timeout; it ends
    only when the orchestrator reports success or failure.
    """

    def __init__(self, selection_count: Callable[[], int]):
        """
        Args:
            selection_count: Returns how many characters are selected
        """
        self._selection_count = selection_count
        self._state = WizardState.CHARACTERS
        self._panel_open = False
        self._opened = False
        self._abandoned = False

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def current_step(self) -> int:
        return self._state.step

    @property
    def visible_panel(self) -> Optional[WizardState]:
        """The panel currently shown, if any."""
        if self._panel_open and self._state.is_panel():
            return self._state
        return None

    @property
    def is_locked(self) -> bool:
        """Navigation is locked while the generation request is in flight."""
        return self._state == WizardState.GENERATING

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    # =========================================================================
    # Navigation
    # =========================================================================

    def open(self) -> Transition:
        """Show the current panel; the first entry into step 1 needs no save."""
        first_entry = not self._opened
        self._opened = True
        self._panel_open = True
        logger.debug(f"[Steps] Opened {self._state.value} (first_entry={first_entry})")
        return Transition(from_state=None, to_state=self._state, save_due=not first_entry)

    def advance(self) -> Transition:
        """Move to the next panel."""
        if self._state == WizardState.CHARACTERS:
            return self._move(WizardState.STORY_DETAILS)
        if self._state == WizardState.STORY_DETAILS:
            return self._move(WizardState.TECHNICAL_SETTINGS)
        raise InvalidTransitionError(
            self._state.value, reason="submit the book to start generation"
        )

    def previous(self) -> Transition:
        """Move back one panel."""
        if self._state == WizardState.STORY_DETAILS:
            return self._move(WizardState.CHARACTERS)
        if self._state == WizardState.TECHNICAL_SETTINGS:
            return self._move(WizardState.STORY_DETAILS)
        raise InvalidTransitionError(self._state.value, reason="no previous step")

    def go_to(self, step: int) -> Transition:
        """Jump directly to a panel by step number."""
        return self._move(WizardState.for_step(step))

    def close_panel(self) -> CloseOutcome:
        """
        Close the visible panel.

        Closing step 1 with nothing selected abandons the session and hands
        control back to the parent page.
        """
        if self.is_locked:
            return CloseOutcome.LOCKED

        self._panel_open = False
        if self._state == WizardState.CHARACTERS and self._selection_count() == 0:
            self._abandoned = True
            logger.info("[Steps] Step 1 closed with no characters, abandoning wizard")
            return CloseOutcome.ABANDONED
        return CloseOutcome.HIDDEN

    def restore(self, step: int) -> None:
        """Position the controller on a draft's step without guards."""
        if self.is_locked:
            raise InvalidTransitionError(self._state.value, reason="generation in progress")
        self._state = WizardState.for_step(step)
        self._opened = True
        self._panel_open = True

    # =========================================================================
    # Generation
    # =========================================================================

    def begin_generation(self) -> Transition:
        """Step 3 -> GENERATING; locks navigation."""
        if self._state != WizardState.TECHNICAL_SETTINGS:
            raise InvalidTransitionError(self._state.value, WizardState.GENERATING.value)
        return self._move(WizardState.GENERATING)

    def finish_generation(self) -> Transition:
        return self._move(WizardState.DONE)

    def fail_generation(self) -> Transition:
        return self._move(WizardState.TECHNICAL_SETTINGS)

    # =========================================================================
    # Internal
    # =========================================================================

    def _move(self, target: WizardState) -> Transition:
        source = self._state
        if target == source:
            raise InvalidTransitionError(source.value, target.value, "already there")
        if target not in ALLOWED_TRANSITIONS[source]:
            raise InvalidTransitionError(source.value, target.value)

        if source == WizardState.CHARACTERS and self._selection_count() < 1:
            raise WizardValidationError(
                "character_ids", "select at least one character to continue"
            )

        self._state = target
        self._opened = True
        self._panel_open = target.is_panel()
        save_due = source.is_panel() and target.is_panel()
        logger.info(f"[Steps] {source.value} -> {target.value}")
        return Transition(from_state=source, to_state=target, save_due=save_due)
