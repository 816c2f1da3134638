"""
Form Reconciliation Engine.

Keeps one canonical WizardFormState and a provenance table recording which
source last wrote each field.

Sources, lowest rank first:
- DEFAULT: initial form values
- PRESELECTION: deep-link character preselection (automatic)
- MANUAL: hand edits
- TEMPLATE: bulk template application
- DRAFT: draft load

Explicit sources (MANUAL, TEMPLATE, DRAFT) are user actions and always write,
so the latest explicit write wins. PRESELECTION is automatic and only writes
a field whose current provenance ranks below it.
"""

import logging
from dataclasses import replace
from enum import Enum, IntEnum
from typing import Any, Callable, Optional

from . import templates
from .entities import (
    BookFormat,
    WizardFormState,
    MAX_FANTASY_LEVEL,
    MAX_GENRES,
    MAX_PAGE_COUNT,
    MAX_SELECTED_CHARACTERS,
    MAX_TONES,
    MIN_FANTASY_LEVEL,
    MIN_PAGE_COUNT,
)
from .errors import WizardValidationError
from .roles import RoleDetailStore

logger = logging.getLogger("storybook_wizard")

PAGE_COUNT_STEP = 5

# Selection is owned by the RoleDetailStore and only changes through it
READ_ONLY_FIELDS = frozenset({"character_ids"})


class FieldSource(IntEnum):
    DEFAULT = 0
    PRESELECTION = 1
    MANUAL = 2
    TEMPLATE = 3
    DRAFT = 4

    @property
    def explicit(self) -> bool:
        return self not in (FieldSource.DEFAULT, FieldSource.PRESELECTION)


class PreselectionStatus(str, Enum):
    """Lifecycle of a deep-link preselection request."""

    NONE = "NONE"
    PENDING = "PENDING"
    APPLIED = "APPLIED"
    MISSING = "MISSING"
    SKIPPED = "SKIPPED"


class FormReconciler:
    """Merges draft loads, templates, manual edits and preselection."""

    def __init__(self, store: RoleDetailStore, initial: Optional[WizardFormState] = None):
        self.store = store
        self._form = initial or WizardFormState()
        self._provenance: dict[str, FieldSource] = {
            name: FieldSource.DEFAULT for name in WizardFormState.field_names()
        }
        self._applied_template: Optional[str] = None
        self._preselection_id: Optional[str] = None
        self._preselection_status = PreselectionStatus.NONE

    @property
    def form_state(self) -> WizardFormState:
        """Copy of the canonical form with the live character selection."""
        return replace(
            self._form,
            character_ids=self.store.selected_ids,
            tone=list(self._form.tone),
            genre=list(self._form.genre),
        )

    @property
    def applied_template(self) -> Optional[str]:
        return self._applied_template

    @property
    def preselection_status(self) -> PreselectionStatus:
        return self._preselection_status

    def source_of(self, name: str) -> FieldSource:
        return self._provenance[name]

    # =========================================================================
    # Writers
    # =========================================================================

    def apply_draft(self, stored_form: dict) -> list[str]:
        """
        Overwrite every field present in a draft's stored form.

        Absent or None fields are left untouched.

        Returns:
            Names of the fields written
        """
        written = []
        for name in WizardFormState.field_names():
            if name in READ_ONLY_FIELDS:
                continue
            value = stored_form.get(name)
            if value is None:
                continue
            if self._write(name, value, FieldSource.DRAFT):
                written.append(name)
        self._provenance["character_ids"] = FieldSource.DRAFT
        logger.info(f"[Reconcile] Draft applied to {len(written)} fields")
        return written

    def check_draft(self, stored_form: dict) -> None:
        """
        Validate a draft's stored form without writing anything.

        Raises:
            WizardValidationError: If a stored field cannot be applied
        """
        for name in WizardFormState.field_names():
            if name in READ_ONLY_FIELDS:
                continue
            value = stored_form.get(name)
            if value is not None:
                _coerce(name, value)

    def apply_template(self, template_id: str) -> list[str]:
        """
        Copy a template's field bundle into the form.

        Raises:
            TemplateNotFoundError: If the template does not exist
        """
        bundle = templates.details(template_id)
        written = [name for name, value in bundle.items()
                   if self._write(name, value, FieldSource.TEMPLATE)]
        self._applied_template = template_id
        logger.info(f"[Reconcile] Template '{template_id}' applied to {len(written)} fields")
        return written

    def set_field(self, name: str, value: Any) -> None:
        """
        Manual edit of a single field.

        Raises:
            WizardValidationError: For unknown or read-only fields
        """
        if name not in self._provenance:
            raise WizardValidationError(name, "unknown form field")
        if name in READ_ONLY_FIELDS:
            raise WizardValidationError(name, "change the selection through the character step")
        self._write(name, value, FieldSource.MANUAL)

    def adjust_page_count(self, delta: int = PAGE_COUNT_STEP) -> int:
        """Step the page count up or down, clamped to the allowed range."""
        target = self._form.page_count + delta
        target = max(MIN_PAGE_COUNT, min(MAX_PAGE_COUNT, target))
        self._write("page_count", target, FieldSource.MANUAL)
        return target

    # =========================================================================
    # Deep-link preselection
    # =========================================================================

    def request_preselection(self, character_id: Optional[str]) -> PreselectionStatus:
        """Register the deep-link character; only the first request counts."""
        if not character_id or self._preselection_status != PreselectionStatus.NONE:
            return self._preselection_status
        self._preselection_id = character_id
        self._preselection_status = PreselectionStatus.PENDING
        logger.info(f"[Reconcile] Preselection pending for {character_id}")
        return self._preselection_status

    def resolve_preselection(
        self,
        directory_loaded: bool,
        character_exists: Callable[[str], bool],
    ) -> PreselectionStatus:
        """
        Apply a pending preselection once the directory has loaded.

        An empty directory that is still loading never counts as "not found".

        Args:
            directory_loaded: Whether the directory fetch has completed
            character_exists: Lookup against the loaded directory
        """
        if self._preselection_status != PreselectionStatus.PENDING:
            return self._preselection_status
        if not directory_loaded:
            return self._preselection_status

        character_id = self._preselection_id
        if not self._accepts("character_ids", FieldSource.PRESELECTION):
            self._preselection_status = PreselectionStatus.SKIPPED
            logger.info(
                f"[Reconcile] Preselection of {character_id} skipped, selection came from "
                f"{self._provenance['character_ids'].name}"
            )
        elif character_exists(character_id):
            self.store.reset_selection([character_id])
            self.store.ensure_default(character_id, preselected=True)
            self._provenance["character_ids"] = FieldSource.PRESELECTION
            self._preselection_status = PreselectionStatus.APPLIED
        else:
            self._preselection_status = PreselectionStatus.MISSING
            logger.warning(f"[Reconcile] Preselected character does not exist: {character_id}")
        return self._preselection_status

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> list[WizardValidationError]:
        """Collect every invariant violation of the current form."""
        form = self.form_state
        errors = []

        count = len(form.character_ids)
        if count < 1:
            errors.append(WizardValidationError("character_ids", "select at least one character"))
        elif count > MAX_SELECTED_CHARACTERS:
            errors.append(WizardValidationError(
                "character_ids", f"at most {MAX_SELECTED_CHARACTERS} characters"
            ))

        if not _is_int(form.page_count) or not MIN_PAGE_COUNT <= form.page_count <= MAX_PAGE_COUNT:
            errors.append(WizardValidationError(
                "page_count", f"must be between {MIN_PAGE_COUNT} and {MAX_PAGE_COUNT}"
            ))
        if not _is_int(form.fantasy_level) or not MIN_FANTASY_LEVEL <= form.fantasy_level <= MAX_FANTASY_LEVEL:
            errors.append(WizardValidationError(
                "fantasy_level", f"must be between {MIN_FANTASY_LEVEL} and {MAX_FANTASY_LEVEL}"
            ))
        if len(form.tone) > MAX_TONES:
            errors.append(WizardValidationError("tone", f"choose at most {MAX_TONES} tones"))
        if len(form.genre) > MAX_GENRES:
            errors.append(WizardValidationError("genre", f"choose at most {MAX_GENRES} genres"))
        return errors

    def ensure_valid(self) -> WizardFormState:
        """
        Raises:
            WizardValidationError: The first violated invariant
        """
        errors = self.validate()
        if errors:
            raise errors[0]
        return self.form_state

    # =========================================================================
    # Internal
    # =========================================================================

    def _accepts(self, name: str, source: FieldSource) -> bool:
        return source.explicit or self._provenance[name] < source

    def _write(self, name: str, value: Any, source: FieldSource) -> bool:
        if not self._accepts(name, source):
            return False
        setattr(self._form, name, _coerce(name, value))
        self._provenance[name] = source
        return True


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce(name: str, value: Any) -> Any:
    if name in ("tone", "genre"):
        return [str(v) for v in value] if isinstance(value, (list, tuple)) else [str(value)]
    if name == "book_format":
        try:
            return BookFormat(value)
        except ValueError:
            raise WizardValidationError(name, f"unknown book format: {value}") from None
    return value
