"""
Draft Persistence Service.

Checkpoints wizard progress so a user can resume later.

Features:
- One serialisation routine (build_draft) shared by manual saves and autosave
- First save creates the draft, later saves update the same identity
- Background autosave task, cancelled on session teardown
- Autosave failures are logged and swallowed; manual failures become notices

Configuration:
- WIZARD_AUTOSAVE_INTERVAL_SECONDS: Seconds between autosaves (default: 60)
- WIZARD_AUTOSAVE_ENABLED: Set to false to disable autosave
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .entities import (
    Draft,
    WizardFormState,
    WizardSnapshot,
    WizardState,
    now_iso,
)
from .errors import (
    DraftNotFoundError,
    DraftOwnershipError,
    DraftPersistenceError,
)
from .notices import NoticeBoard
from .ports import DraftStore

logger = logging.getLogger("storybook_wizard")

DEFAULT_AUTOSAVE_INTERVAL = 60.0
DEFAULT_DRAFT_TITLE = "Untitled book"
DRAFT_STATUS = "draft"
TOTAL_STEPS = 3

Sleeper = Callable[[float], Awaitable[None]]


class AutosaveTask:
    """
    Recurring background task with an explicit cancellation handle.

    Calls `tick` every `interval` seconds until stopped.
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[None]],
        interval: float = DEFAULT_AUTOSAVE_INTERVAL,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.interval = interval
        self._tick = tick
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info(f"[Autosave] Started with interval: {self.interval}s")

    async def stop(self) -> None:
        """Cancel the task and wait until it has fully exited."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("[Autosave] Stopped")

    async def _loop(self) -> None:
        while self._running:
            try:
                await self._sleep(self.interval)

                if not self._running:
                    break

                await self._tick()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"[Autosave] Loop error: {e}")


class DraftPersistenceService:
    """Creates, updates and loads the draft of one wizard session."""

    def __init__(
        self,
        store: DraftStore,
        user_id: Optional[str],
        autosave_interval: float = DEFAULT_AUTOSAVE_INTERVAL,
        autosave_enabled: bool = True,
        sleep: Sleeper = asyncio.sleep,
    ):
        """
        Args:
            store: Draft collaborator
            user_id: Authenticated actor, None for anonymous sessions
            autosave_interval: Seconds between autosaves
            autosave_enabled: Whether the background autosave may write
            sleep: Coroutine used by the autosave timer
        """
        self.store = store
        self.user_id = user_id
        self.autosave_enabled = autosave_enabled
        self.autosave_interval = autosave_interval
        self._sleep = sleep
        self._draft_id: Optional[str] = None
        self._lock = asyncio.Lock()
        self._autosave: Optional[AutosaveTask] = None
        self.save_count = 0

    @property
    def draft_id(self) -> Optional[str]:
        return self._draft_id

    @property
    def autosave_running(self) -> bool:
        return self._autosave is not None and self._autosave.running

    # =========================================================================
    # Serialisation
    # =========================================================================

    def build_draft(self, snapshot: WizardSnapshot) -> Draft:
        """
        Serialise a session snapshot into a Draft record.

        Optional form fields that are None are replaced by their defaults.
        """
        step = snapshot.current_step
        completed = [step > 1, step > 2, step > TOTAL_STEPS]

        defaults = WizardFormState().to_dict()
        form = snapshot.form_state.to_dict()
        form.pop("character_ids", None)
        sanitized = {
            name: (defaults[name] if value is None else value)
            for name, value in form.items()
        }

        return Draft(
            draft_id=self._draft_id,
            user_id=str(self.user_id),
            title=snapshot.form_state.title or DEFAULT_DRAFT_TITLE,
            current_step=step,
            progress=round(sum(completed) * 100 / TOTAL_STEPS),
            step1_completed=completed[0],
            step2_completed=completed[1],
            step3_completed=completed[2],
            status=DRAFT_STATUS,
            character_ids=list(snapshot.character_ids),
            character_details=dict(snapshot.character_details),
            form_state=sanitized,
            updated_at=now_iso(),
        )

    # =========================================================================
    # Save
    # =========================================================================

    async def save(self, snapshot: WizardSnapshot) -> Draft:
        """
        Write the snapshot: update when the session has a draft, else create.

        Raises:
            DraftPersistenceError: When there is no actor or the store fails
        """
        if not self.user_id:
            raise DraftPersistenceError("Drafts can only be saved for a signed-in user")

        async with self._lock:
            draft = self.build_draft(snapshot)
            try:
                if self._draft_id is None:
                    saved = await self.store.create(draft)
                    self._draft_id = saved.draft_id
                    logger.info(f"[Drafts] Created draft {self._draft_id} at step {draft.current_step}")
                else:
                    saved = await self.store.update(self._draft_id, draft)
                    logger.debug(f"[Drafts] Updated draft {self._draft_id} at step {draft.current_step}")
            except DraftPersistenceError:
                raise
            except Exception as e:
                raise DraftPersistenceError(f"Failed to save draft: {e}") from e

            self.save_count += 1
            return saved

    async def save_manual(self, snapshot: WizardSnapshot, notices: NoticeBoard) -> Optional[Draft]:
        """Explicit save; a failure becomes a notice and never blocks navigation."""
        try:
            return await self.save(snapshot)
        except DraftPersistenceError as e:
            logger.error(f"[Drafts] Manual save failed: {e}")
            notices.error("Draft not saved", "We could not save your progress. Your changes are kept.")
            return None

    def should_autosave(self, snapshot: WizardSnapshot) -> bool:
        if not self.autosave_enabled or not self.user_id:
            return False
        if snapshot.state == WizardState.CHARACTERS and not snapshot.character_ids:
            return False
        return True

    async def autosave(self, snapshot: WizardSnapshot) -> Optional[Draft]:
        """Background save; failures are logged and swallowed."""
        if not self.should_autosave(snapshot):
            return None
        try:
            return await self.save(snapshot)
        except DraftPersistenceError as e:
            logger.warning(f"[Autosave] Save failed, will retry next interval: {e}")
            return None

    async def start_autosave(self, snapshot_provider: Callable[[], WizardSnapshot]) -> None:
        """Start the recurring autosave for the session."""
        if self._autosave is not None:
            return

        async def tick() -> None:
            await self.autosave(snapshot_provider())

        self._autosave = AutosaveTask(tick, interval=self.autosave_interval, sleep=self._sleep)
        await self._autosave.start()

    async def stop_autosave(self) -> None:
        if self._autosave is not None:
            await self._autosave.stop()
            self._autosave = None

    # =========================================================================
    # Load
    # =========================================================================

    async def load(self, draft_id: str) -> Draft:
        """
        Fetch a draft and check it belongs to the session user.

        The draft id is not taken over until `adopt` is called.

        Raises:
            DraftNotFoundError: If the draft does not exist
            DraftOwnershipError: If the draft belongs to another user
            DraftPersistenceError: If the store fails
        """
        async with self._lock:
            try:
                draft = await self.store.get(draft_id)
            except DraftNotFoundError:
                raise
            except Exception as e:
                raise DraftPersistenceError(f"Failed to load draft {draft_id}: {e}") from e

            if self.user_id and draft.user_id != str(self.user_id):
                raise DraftOwnershipError(draft_id, str(self.user_id))

            logger.info(f"[Drafts] Loaded draft {draft_id} at step {draft.current_step}")
            return draft

    def adopt(self, draft: Draft) -> None:
        """Use a loaded draft's identity for later saves."""
        self._draft_id = draft.draft_id
