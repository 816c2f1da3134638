"""
Template Catalog.

Static library of story presets for the story customisation step.
"custom" starts from scratch and carries no field values, so applying it
leaves the form as it is. It does not fall back to the adventure bundle,
and neither does an unknown id, which raises TemplateNotFoundError.
"""

import copy

from .entities import Template
from .errors import TemplateNotFoundError

CUSTOM_TEMPLATE_ID = "custom"
DEFAULT_TEMPLATE_ID = "adventure"

# Fields a template may set on the form
TEMPLATE_FIELDS = (
    "scenario",
    "era",
    "adventure_type",
    "tone",
    "moral_value",
    "fantasy_level",
    "genre",
    "art_style",
)

_TEMPLATES: dict[str, Template] = {
    CUSTOM_TEMPLATE_ID: Template(
        template_id=CUSTOM_TEMPLATE_ID,
        title="Custom",
        description="Build a fully personalised story from scratch",
        details={},
    ),
    "adventure": Template(
        template_id="adventure",
        title="Fantasy adventure",
        description="An exciting adventure in a magical kingdom",
        details={
            "scenario": "A magical kingdom",
            "era": "Fantasy medieval",
            "adventure_type": "Treasure hunt",
            "tone": ["Exciting", "Optimistic"],
            "moral_value": "Courage and friendship",
            "fantasy_level": 8,
            "genre": ["Fantasy", "Adventure"],
            "art_style": "watercolor",
        },
    ),
    "science": Template(
        template_id="science",
        title="Space exploration",
        description="An educational journey through outer space",
        details={
            "scenario": "Outer space",
            "era": "Distant future",
            "adventure_type": "Space exploration",
            "tone": ["Educational", "Inspiring"],
            "moral_value": "Curiosity and knowledge",
            "fantasy_level": 5,
            "genre": ["Science fiction", "Educational"],
            "art_style": "digital",
        },
    ),
    "nature": Template(
        template_id="nature",
        title="Enchanted nature",
        description="Discovering and respecting the natural world",
        details={
            "scenario": "Enchanted forest",
            "era": "Present day",
            "adventure_type": "Nature discovery",
            "tone": ["Calm", "Thoughtful"],
            "moral_value": "Respect for nature",
            "fantasy_level": 6,
            "genre": ["Nature", "Educational"],
            "art_style": "naturalist",
        },
    ),
    "family": Template(
        template_id="family",
        title="Family values",
        description="A story about cooperation and family bonds",
        details={
            "scenario": "Family home",
            "era": "Present day",
            "adventure_type": "Learning values",
            "tone": ["Heartfelt", "Fun"],
            "moral_value": "Family and cooperation",
            "fantasy_level": 4,
            "genre": ["Everyday life", "Family"],
            "art_style": "childlike",
        },
    ),
}


def list_templates() -> list[Template]:
    """All templates in display order."""
    return list(_TEMPLATES.values())


def get_template(template_id: str) -> Template:
    try:
        return _TEMPLATES[template_id]
    except KeyError:
        raise TemplateNotFoundError(template_id) from None


def details(template_id: str) -> dict:
    """
    Field values of a template.

    Returns a fresh copy so callers can never mutate the catalog.

    Raises:
        TemplateNotFoundError: If the template does not exist
    """
    return copy.deepcopy(get_template(template_id).details)
