"""
Storybook creation wizard.

Multi-step book-creation flow for personalised children's books:
character selection, story customisation, technical settings,
resumable drafts and the final generation request.
"""

__version__ = "1.0.0"
