"""
Tests for the Template Catalog.
"""

import pytest

from src.wizard import templates
from src.wizard.errors import TemplateNotFoundError


class TestTemplateCatalog:
    """Tests for listing and reading templates."""

    def test_lists_all_templates_custom_first(self):
        ids = [t.template_id for t in templates.list_templates()]
        assert ids == ["custom", "adventure", "science", "nature", "family"]

    def test_custom_template_has_no_fields(self):
        assert templates.details("custom") == {}

    def test_unknown_template_raises(self):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            templates.get_template("space-opera")
        assert exc_info.value.template_id == "space-opera"

    def test_templates_only_set_known_fields(self):
        for template in templates.list_templates():
            assert set(template.details) <= set(templates.TEMPLATE_FIELDS)

    def test_details_returns_copy(self):
        """Mutating the returned mapping never changes the catalog."""
        bundle = templates.details("science")
        bundle["tone"].append("Scary")
        bundle["scenario"] = "Haunted house"

        fresh = templates.details("science")
        assert fresh["tone"] == ["Educational", "Inspiring"]
        assert fresh["scenario"] == "Outer space"

    @pytest.mark.parametrize("template_id", ["adventure", "science", "nature", "family"])
    def test_template_values_within_limits(self, template_id):
        bundle = templates.details(template_id)
        assert 1 <= bundle["fantasy_level"] <= 10
        assert len(bundle["tone"]) <= 3
        assert len(bundle["genre"]) <= 3
