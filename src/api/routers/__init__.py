"""
API Routers package.
"""

from . import drafts, characters, templates

__all__ = ["drafts", "characters", "templates"]
