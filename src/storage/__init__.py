"""
Storage module - SQLite persistence for characters and drafts.
"""

from .persistence import PersistenceAdapter
from .adapters import CharacterDirectoryAdapter, DraftRepository

__all__ = [
    "PersistenceAdapter",
    "CharacterDirectoryAdapter",
    "DraftRepository",
]
