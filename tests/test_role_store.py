"""
Tests for the Role/Detail Store.
"""

import pytest

from src.wizard.entities import CharacterRole, CharacterStoryDetail
from src.wizard.errors import WizardValidationError
from src.wizard.notices import NoticeBoard
from src.wizard.roles import RoleDetailStore


@pytest.fixture
def store():
    return RoleDetailStore(NoticeBoard())


class TestSelection:
    """Tests for selecting and deselecting characters."""

    def test_select_appends_in_order(self, store):
        assert store.select("c1") is True
        assert store.select("c2") is True
        assert store.selected_ids == ["c1", "c2"]

    def test_select_twice_is_noop(self, store):
        store.select("c1")
        assert store.select("c1") is False
        assert store.count == 1

    def test_sixth_selection_is_ignored_with_notice(self, store):
        """Selection never exceeds five characters."""
        for i in range(1, 6):
            assert store.select(f"c{i}")

        assert store.select("c6") is False
        assert store.count == 5
        assert "c6" not in store.selected_ids
        assert store.notices.notices[-1].title == "Maximum reached"

    def test_select_creates_detail_without_role(self, store):
        store.select("c1")
        detail = store.get_detail("c1")
        assert detail is not None
        assert detail.role is None

    def test_deselect_keeps_detail(self, store):
        """Re-selecting restores the previous detail record."""
        store.select("c1")
        detail = CharacterStoryDetail(role=CharacterRole.MENTOR, story_background="Wise owl")
        store.set_detail("c1", detail)

        assert store.deselect("c1") is True
        assert store.count == 0
        assert store.get_detail("c1") == detail

        store.select("c1")
        assert store.get_detail("c1").role == CharacterRole.MENTOR

    def test_deselect_unknown_returns_false(self, store):
        assert store.deselect("missing") is False

    def test_reset_selection_rejects_more_than_five(self, store):
        with pytest.raises(WizardValidationError):
            store.reset_selection(["a", "b", "c", "d", "e", "f"])

    def test_reset_selection_removes_duplicates(self, store):
        store.reset_selection(["c1", "c2", "c1"])
        assert store.selected_ids == ["c1", "c2"]


class TestDetails:
    """Tests for story details and default roles."""

    def test_set_detail_replaces_record(self, store):
        store.select("c1")
        store.set_detail("c1", CharacterStoryDetail(specific_traits=["Shy"]))
        store.set_detail("c1", CharacterStoryDetail(role=CharacterRole.ALLY))

        detail = store.get_detail("c1")
        assert detail.role == CharacterRole.ALLY
        assert detail.specific_traits == []

    def test_set_detail_requires_complete_record(self, store):
        with pytest.raises(WizardValidationError):
            store.set_detail("c1", {"role": "ally"})

    def test_first_preselection_becomes_protagonist(self, store):
        store.reset_selection(["c1"])
        detail = store.ensure_default("c1", preselected=True)

        assert detail.role == CharacterRole.PROTAGONIST
        assert detail.specific_traits == ["Brave", "Curious"]

    def test_second_preselection_gets_no_role(self, store):
        store.ensure_default("c1", preselected=True)
        detail = store.ensure_default("c2", preselected=True)
        assert detail.role is None

    def test_ensure_default_keeps_existing(self, store):
        store.set_detail("c1", CharacterStoryDetail(role=CharacterRole.ANTAGONIST))
        detail = store.ensure_default("c1", preselected=True)
        assert detail.role == CharacterRole.ANTAGONIST

    def test_restore_replaces_everything(self, store):
        store.select("c1")
        store.select("c2")
        store.restore(["c3"], {"c3": CharacterStoryDetail(role=CharacterRole.SECONDARY)})

        assert store.selected_ids == ["c3"]
        assert store.get_detail("c1") is None
        assert store.get_detail("c3").role == CharacterRole.SECONDARY

    def test_restore_fills_missing_details(self, store):
        store.restore(["c1", "c2"], {})
        assert store.get_detail("c1") == CharacterStoryDetail()
        assert store.get_detail("c2") == CharacterStoryDetail()

    def test_clear(self, store):
        store.select("c1")
        store.clear()
        assert store.count == 0
        assert store.details == {}
