"""
Tests for the SQLite persistence adapter and its async port adapters.
"""

import pytest

from src.storage.adapters import CharacterDirectoryAdapter, DraftRepository
from src.wizard.entities import (
    Character,
    CharacterCategory,
    CharacterRole,
    CharacterStoryDetail,
    Draft,
)
from src.wizard.errors import (
    CharacterNotFoundError,
    DraftNotFoundError,
    WizardValidationError,
)


def make_draft(user_id="user-1", **overrides):
    values = dict(
        user_id=user_id,
        title="Dragons",
        current_step=2,
        progress=33,
        step1_completed=True,
        character_ids=["c1", "c2"],
        character_details={
            "c1": CharacterStoryDetail(role=CharacterRole.PROTAGONIST, specific_traits=["Brave"]),
            "c2": CharacterStoryDetail(),
        },
        form_state={"scenario": "Volcano", "tone": ["Calm"], "page_count": 25},
    )
    values.update(overrides)
    return Draft(**values)


class TestCharacters:
    """Tests for character storage."""

    def test_create_and_get(self, persistence):
        character = Character.create("Lucia", CharacterCategory.CHILD, owner_id="user-1", age=7)
        persistence.create_character(character)

        loaded = persistence.get_character(character.character_id)
        assert loaded == character

    def test_get_unknown_returns_none(self, persistence):
        assert persistence.get_character("missing") is None

    def test_list_is_scoped_to_owner(self, persistence):
        persistence.create_character(Character.create("Lucia", owner_id="user-1"))
        persistence.create_character(Character.create("Mateo", owner_id="user-1"))
        persistence.create_character(Character.create("Other", owner_id="user-2"))

        names = {c.name for c in persistence.list_characters("user-1")}
        assert names == {"Lucia", "Mateo"}

    def test_update_character(self, persistence):
        character = Character.create("Lucia", owner_id="user-1")
        persistence.create_character(character)

        updated = persistence.update_character(
            character.character_id,
            {"name": "Lucía", "category": CharacterCategory.ADULT, "owner_id": "intruder"},
        )

        assert updated.name == "Lucía"
        assert updated.category == CharacterCategory.ADULT
        assert updated.owner_id == "user-1"

    def test_update_unknown_character(self, persistence):
        with pytest.raises(CharacterNotFoundError):
            persistence.update_character("missing", {"name": "X"})


class TestDrafts:
    """Tests for draft storage."""

    def test_create_assigns_id_and_round_trips(self, persistence):
        draft = persistence.create_draft(make_draft())
        assert draft.draft_id is not None

        loaded = persistence.get_draft(draft.draft_id)
        assert loaded.title == "Dragons"
        assert loaded.current_step == 2
        assert loaded.step1_completed is True
        assert loaded.character_ids == ["c1", "c2"]
        assert loaded.character_details["c1"].role == CharacterRole.PROTAGONIST
        assert loaded.character_details["c1"].specific_traits == ["Brave"]
        assert loaded.form_state == {"scenario": "Volcano", "tone": ["Calm"], "page_count": 25}

    def test_update_keeps_identity_and_owner(self, persistence):
        created = persistence.create_draft(make_draft())

        updated = persistence.update_draft(
            created.draft_id,
            make_draft(user_id="someone-else", title="Volcanoes", current_step=3),
        )

        assert updated.draft_id == created.draft_id
        assert updated.title == "Volcanoes"
        assert updated.current_step == 3
        assert updated.user_id == "user-1"
        assert updated.created_at == created.created_at

    def test_update_unknown_draft(self, persistence):
        with pytest.raises(DraftNotFoundError):
            persistence.update_draft("missing", make_draft())

    def test_list_drafts_for_user(self, persistence):
        persistence.create_draft(make_draft(updated_at="2026-01-01T00:00:00Z", title="Old"))
        persistence.create_draft(make_draft(updated_at="2026-02-01T00:00:00Z", title="New"))
        persistence.create_draft(make_draft(user_id="user-2"))

        drafts = persistence.list_drafts("user-1")
        assert [d.title for d in drafts] == ["New", "Old"]

    def test_delete_draft(self, persistence):
        draft = persistence.create_draft(make_draft())
        persistence.delete_draft(draft.draft_id)

        assert persistence.get_draft(draft.draft_id) is None
        with pytest.raises(DraftNotFoundError):
            persistence.delete_draft(draft.draft_id)


class TestAdapters:
    """Tests for the async port adapters."""

    @pytest.mark.asyncio
    async def test_directory_create_and_list(self, persistence):
        directory = CharacterDirectoryAdapter(persistence)

        created = await directory.create("user-1", {"name": " Rex ", "category": "pet", "age": 3})
        listed = await directory.list("user-1")

        assert created.name == "Rex"
        assert created.age is None
        assert [c.character_id for c in listed] == [created.character_id]

    @pytest.mark.asyncio
    async def test_directory_keeps_age_for_people(self, persistence):
        directory = CharacterDirectoryAdapter(persistence)
        created = await directory.create("user-1", {"name": "Lucia", "category": "child", "age": 7})
        assert created.age == 7

    @pytest.mark.asyncio
    async def test_directory_rejects_short_name(self, persistence):
        directory = CharacterDirectoryAdapter(persistence)
        with pytest.raises(WizardValidationError):
            await directory.create("user-1", {"name": "R"})

    @pytest.mark.asyncio
    async def test_directory_rejects_unknown_category(self, persistence):
        directory = CharacterDirectoryAdapter(persistence)
        with pytest.raises(WizardValidationError):
            await directory.create("user-1", {"name": "Rex", "category": "dinosaur"})

    @pytest.mark.asyncio
    async def test_draft_repository(self, persistence):
        repository = DraftRepository(persistence)

        created = await repository.create(make_draft())
        await repository.update(created.draft_id, make_draft(title="Second"))
        loaded = await repository.get(created.draft_id)

        assert loaded.title == "Second"
        with pytest.raises(DraftNotFoundError):
            await repository.get("missing")
