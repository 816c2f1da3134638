"""
Pytest configuration and shared fixtures.

Provides in-memory fakes for the wizard's collaborators and a virtual clock
for the autosave timer.
"""

import asyncio
import os
from typing import Optional

import pytest

from src.wizard.entities import Character, CharacterCategory, Draft
from src.wizard.errors import DraftNotFoundError


@pytest.fixture(autouse=True, scope="function")
def reset_auth_module():
    """
    Reset auth module state before each test.

    This ensures tests run with API_AUTH_ENABLED=false by default,
    unless the test explicitly sets it otherwise.
    """
    original_auth_enabled = os.environ.get("API_AUTH_ENABLED")
    original_api_key = os.environ.get("API_KEY")

    os.environ["API_AUTH_ENABLED"] = "false"

    yield

    if original_auth_enabled is not None:
        os.environ["API_AUTH_ENABLED"] = original_auth_enabled
    elif "API_AUTH_ENABLED" in os.environ:
        del os.environ["API_AUTH_ENABLED"]

    if original_api_key is not None:
        os.environ["API_KEY"] = original_api_key
    elif "API_KEY" in os.environ:
        del os.environ["API_KEY"]

    try:
        import importlib
        import src.api.dependencies.auth as auth_module
        importlib.reload(auth_module)
    except ImportError:
        pass


# =============================================================================
# Fakes
# =============================================================================


def make_character(character_id: str, name: Optional[str] = None, owner_id: str = "user-1") -> Character:
    return Character(
        character_id=character_id,
        name=name or f"Character {character_id}",
        category=CharacterCategory.CHILD,
        owner_id=owner_id,
        age=6,
        avatar_url=f"https://img.example/{character_id}.png",
    )


class FakeDirectory:
    """In-memory CharacterDirectory."""

    def __init__(self, characters=None):
        self.characters = {c.character_id: c for c in characters or []}
        self.fail_list = False
        self.fail_create = False
        self.list_calls = 0

    async def list(self, user_id):
        self.list_calls += 1
        if self.fail_list:
            raise RuntimeError("directory unavailable")
        return list(self.characters.values())

    async def create(self, user_id, fields):
        if self.fail_create:
            raise RuntimeError("directory unavailable")
        character = Character.create(
            fields["name"],
            category=fields.get("category", CharacterCategory.CHILD),
            owner_id=user_id,
        )
        self.characters[character.character_id] = character
        return character

    async def update(self, character_id, fields):
        character = self.characters[character_id]
        for name, value in fields.items():
            setattr(character, name, value)
        return character


class FakeDraftStore:
    """In-memory DraftStore recording every call."""

    def __init__(self):
        self.drafts: dict[str, Draft] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail = False
        self._next_id = 1

    async def create(self, draft):
        if self.fail:
            raise RuntimeError("store unavailable")
        draft_id = f"draft-{self._next_id}"
        self._next_id += 1
        stored = Draft.from_dict({**draft.to_dict(), "draft_id": draft_id})
        self.drafts[draft_id] = stored
        self.calls.append(("create", draft_id))
        return Draft.from_dict(stored.to_dict())

    async def update(self, draft_id, draft):
        if self.fail:
            raise RuntimeError("store unavailable")
        if draft_id not in self.drafts:
            raise DraftNotFoundError(draft_id)
        stored = Draft.from_dict({**draft.to_dict(), "draft_id": draft_id})
        self.drafts[draft_id] = stored
        self.calls.append(("update", draft_id))
        return Draft.from_dict(stored.to_dict())

    async def get(self, draft_id):
        if self.fail:
            raise RuntimeError("store unavailable")
        self.calls.append(("get", draft_id))
        if draft_id not in self.drafts:
            raise DraftNotFoundError(draft_id)
        return Draft.from_dict(self.drafts[draft_id].to_dict())


class FakeGenerationService:
    """GenerationService returning a canned response."""

    def __init__(self, response=None, error: Optional[Exception] = None):
        self.response = response if response is not None else {"id": "book-1", "status": "queued"}
        self.error = error
        self.payloads: list[dict] = []

    async def create(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


class VirtualClock:
    """
    Deterministic replacement for asyncio.sleep.

    Advances virtual time on every sleep. A sleep that would pass the
    horizon sets `exhausted` and parks until the task is cancelled.
    """

    def __init__(self, horizon: float):
        self.now = 0.0
        self.horizon = horizon
        self.exhausted = asyncio.Event()

    async def sleep(self, seconds: float) -> None:
        if self.now + seconds > self.horizon:
            self.exhausted.set()
            await asyncio.Event().wait()
        self.now += seconds
        await asyncio.sleep(0)


async def park(seconds: float) -> None:
    """Sleep that never returns on its own."""
    await asyncio.Event().wait()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def characters():
    return [make_character(f"c{i}", name) for i, name in enumerate(
        ["Lucia", "Mateo", "Bruno", "Nube", "Pip"], start=1
    )]


@pytest.fixture
def directory(characters):
    return FakeDirectory(characters)


@pytest.fixture
def draft_store():
    return FakeDraftStore()


@pytest.fixture
def generation_service():
    return FakeGenerationService()


@pytest.fixture
def make_session(directory, draft_store, generation_service):
    """Factory for WizardSession wired to the fakes; autosave never fires."""
    from src.wizard.session import WizardSession

    def _make(user_id: Optional[str] = "user-1", **kwargs):
        kwargs.setdefault("sleep", park)
        return WizardSession(user_id, directory, draft_store, generation_service, **kwargs)

    return _make


@pytest.fixture
def character_factory():
    return make_character


@pytest.fixture
def virtual_clock():
    """Factory: virtual_clock(horizon) -> VirtualClock."""
    return VirtualClock


@pytest.fixture
def persistence(tmp_path):
    from src.storage.persistence import PersistenceAdapter

    return PersistenceAdapter(tmp_path / "db" / "wizard.sqlite")


@pytest.fixture
def api_client(persistence):
    """TestClient on a freshly loaded app backed by a temporary database."""
    import importlib
    from fastapi.testclient import TestClient

    import src.api.dependencies.auth as auth_module
    importlib.reload(auth_module)

    import src.api.main as main_module
    importlib.reload(main_module)

    from src.api._storage_state import get_persistence

    main_module.app.dependency_overrides[get_persistence] = lambda: persistence
    yield TestClient(main_module.app)
    main_module.app.dependency_overrides.clear()
