"""
Wizard Domain Entities.

- Character: directory record referenced (never mutated) by the wizard
- CharacterStoryDetail: story-specific role and traits for one character
- WizardFormState: story customisation and technical settings
- Draft: persisted, resumable snapshot of a wizard session
- Template: static preset bundle of form field values
- WizardSnapshot: aggregate view of a live session
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Optional, Any
import uuid


MAX_SELECTED_CHARACTERS = 5
MIN_PAGE_COUNT = 10
MAX_PAGE_COUNT = 40
MIN_FANTASY_LEVEL = 1
MAX_FANTASY_LEVEL = 10
MAX_TONES = 3
MAX_GENRES = 3


class CharacterCategory(str, Enum):
    """Kinds of characters a user can keep in the directory."""

    CHILD = "child"
    ADULT = "adult"
    PET = "pet"
    TOY = "toy"
    FANTASY = "fantasy"
    OTHER = "other"


class CharacterRole(str, Enum):
    """Role a character plays in one particular story."""

    PROTAGONIST = "protagonist"
    SECONDARY = "secondary"
    ANTAGONIST = "antagonist"
    MENTOR = "mentor"
    ALLY = "ally"


class BookFormat(str, Enum):
    """Delivery format of the finished book."""

    DIGITAL = "digital"
    SOFTCOVER = "softcover"
    HARDCOVER = "hardcover"


class WizardState(str, Enum):
    """
    Wizard lifecycle states.

    The first three each own exactly one panel:
    - CHARACTERS: step 1, character selection
    - STORY_DETAILS: step 2, story customisation
    - TECHNICAL_SETTINGS: step 3, layout and illustration settings
    - GENERATING: generation request in flight, navigation locked
    - DONE: generated book identity received
    """

    CHARACTERS = "CHARACTERS"
    STORY_DETAILS = "STORY_DETAILS"
    TECHNICAL_SETTINGS = "TECHNICAL_SETTINGS"
    GENERATING = "GENERATING"
    DONE = "DONE"

    @property
    def step(self) -> int:
        """Step number (1-3) of the panel this state belongs to."""
        return _STATE_STEPS[self]

    @classmethod
    def for_step(cls, step: int) -> "WizardState":
        """Panel state for a step number."""
        for state, number in _STATE_STEPS.items():
            if number == step and state.is_panel():
                return state
        raise ValueError(f"Invalid wizard step: {step}")

    def is_panel(self) -> bool:
        return self in (
            WizardState.CHARACTERS,
            WizardState.STORY_DETAILS,
            WizardState.TECHNICAL_SETTINGS,
        )


_STATE_STEPS = {
    WizardState.CHARACTERS: 1,
    WizardState.STORY_DETAILS: 2,
    WizardState.TECHNICAL_SETTINGS: 3,
    WizardState.GENERATING: 3,
    WizardState.DONE: 3,
}


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def now_iso() -> str:
    """Get current time as ISO format string."""
    return datetime.utcnow().isoformat() + "Z"


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass
class Character:
    """
    Character record owned by the Character Directory.

    The wizard references characters by `character_id` and only creates
    them through the directory adapter.
    """

    character_id: str
    name: str
    category: CharacterCategory = CharacterCategory.CHILD
    owner_id: Optional[str] = None
    age: Optional[int] = None
    avatar_url: Optional[str] = None
    gender: Optional[str] = None
    physical_description: Optional[str] = None
    personality: Optional[str] = None
    likes: Optional[str] = None
    dislikes: Optional[str] = None
    interests: Optional[str] = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    @classmethod
    def create(
        cls,
        name: str,
        category: CharacterCategory = CharacterCategory.CHILD,
        owner_id: Optional[str] = None,
        **attributes: Any,
    ) -> "Character":
        """Create a new Character with generated ID."""
        return cls(
            character_id=generate_uuid(),
            name=name,
            category=CharacterCategory(category),
            owner_id=owner_id,
            **attributes,
        )

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["category"] = self.category.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Character":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["character_id"] = str(values["character_id"])
        values["category"] = CharacterCategory(values.get("category") or CharacterCategory.OTHER)
        return cls(**values)


@dataclass
class CharacterStoryDetail:
    """
    Story-specific details for one selected character.

    `role` is None until the user picks one, except for deep-link
    preselections which start as protagonist.
    """

    role: Optional[CharacterRole] = None
    specific_traits: list[str] = field(default_factory=list)
    story_background: str = ""
    special_abilities: list[str] = field(default_factory=list)
    custom_description: str = ""

    def to_dict(self) -> dict:
        return {
            "role": self.role.value if self.role else None,
            "specific_traits": list(self.specific_traits),
            "story_background": self.story_background,
            "special_abilities": list(self.special_abilities),
            "custom_description": self.custom_description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CharacterStoryDetail":
        role = data.get("role")
        return cls(
            role=CharacterRole(role) if role else None,
            specific_traits=_as_list(data.get("specific_traits")),
            story_background=data.get("story_background") or "",
            special_abilities=_as_list(data.get("special_abilities")),
            custom_description=data.get("custom_description") or "",
        )


@dataclass
class WizardFormState:
    """
    Canonical story customisation and technical settings.

    Defaults are the "adventure" preset with a 20 page book.
    `character_ids` is ordered; the first entry is the primary character.
    """

    title: Optional[str] = ""
    character_ids: list[str] = field(default_factory=list)
    scenario: str = "A magical kingdom"
    era: str = "Fantasy medieval"
    adventure_type: str = "Treasure hunt"
    tone: list[str] = field(default_factory=lambda: ["Exciting", "Optimistic"])
    moral_value: str = "Courage and friendship"
    fantasy_level: int = 8
    genre: list[str] = field(default_factory=lambda: ["Fantasy", "Adventure"])
    art_style: str = "watercolor"
    page_count: int = 20
    font_style: str = "casual"
    book_format: BookFormat = BookFormat.DIGITAL
    story_objective: Optional[str] = ""
    special_instructions: Optional[str] = ""

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["character_ids"] = list(self.character_ids)
        data["tone"] = list(self.tone)
        data["genre"] = list(self.genre)
        data["book_format"] = BookFormat(self.book_format).value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WizardFormState":
        """Build a form state; missing or None fields keep their defaults."""
        state = cls()
        for name in cls.field_names():
            value = data.get(name)
            if value is not None:
                setattr(state, name, value)
        state.book_format = BookFormat(state.book_format)
        return state


@dataclass
class Draft:
    """
    Persisted snapshot of an in-progress wizard session.

    `form_state` is the stored form mapping; keys may be missing when the
    draft was written by an older client.
    """

    user_id: str
    title: str
    current_step: int = 1
    progress: int = 0
    step1_completed: bool = False
    step2_completed: bool = False
    step3_completed: bool = False
    status: str = "draft"
    character_ids: list[str] = field(default_factory=list)
    character_details: dict[str, CharacterStoryDetail] = field(default_factory=dict)
    form_state: dict = field(default_factory=dict)
    draft_id: Optional[str] = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def to_dict(self) -> dict:
        return {
            "draft_id": self.draft_id,
            "user_id": self.user_id,
            "title": self.title,
            "current_step": self.current_step,
            "progress": self.progress,
            "step1_completed": self.step1_completed,
            "step2_completed": self.step2_completed,
            "step3_completed": self.step3_completed,
            "status": self.status,
            "character_ids": list(self.character_ids),
            "character_details": {
                cid: detail.to_dict() for cid, detail in self.character_details.items()
            },
            "form_state": dict(self.form_state),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Draft":
        details = data.get("character_details") or {}
        return cls(
            draft_id=str(data["draft_id"]) if data.get("draft_id") is not None else None,
            user_id=str(data["user_id"]),
            title=data.get("title") or "",
            current_step=int(data.get("current_step") or 1),
            progress=int(data.get("progress") or 0),
            step1_completed=bool(data.get("step1_completed")),
            step2_completed=bool(data.get("step2_completed")),
            step3_completed=bool(data.get("step3_completed")),
            status=data.get("status") or "draft",
            character_ids=[str(cid) for cid in data.get("character_ids") or []],
            character_details={
                str(cid): (
                    detail if isinstance(detail, CharacterStoryDetail)
                    else CharacterStoryDetail.from_dict(detail)
                )
                for cid, detail in details.items()
            },
            form_state=dict(data.get("form_state") or {}),
            created_at=data.get("created_at") or now_iso(),
            updated_at=data.get("updated_at") or now_iso(),
        )


@dataclass(frozen=True)
class Template:
    """Curated starting point for the story customisation step."""

    template_id: str
    title: str
    description: str
    details: dict = field(default_factory=dict)


@dataclass
class WizardSnapshot:
    """Aggregate state of a live session, as handed to drafts and submission."""

    state: WizardState
    character_ids: list[str]
    character_details: dict[str, CharacterStoryDetail]
    form_state: WizardFormState
    user_id: Optional[str] = None

    @property
    def current_step(self) -> int:
        return self.state.step


@dataclass
class GenerationResult:
    """Outcome of a successful generation request."""

    book_id: str
    response: dict = field(default_factory=dict)
