"""
Storage state management for API integration.

Provides singleton access to the PersistenceAdapter instance.
Initialized during FastAPI lifespan.

Usage:
    from ._storage_state import get_persistence, init_persistence

    # In lifespan:
    init_persistence(settings.db_path)

    # In routers:
    persistence: PersistenceAdapter = Depends(get_persistence)
"""

import logging
from pathlib import Path
from typing import Optional

from src.storage.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)

# Global persistence instance
_persistence: Optional[PersistenceAdapter] = None


def init_persistence(db_path: str | Path) -> PersistenceAdapter:
    """
    Initialize the persistence singleton.

    Args:
        db_path: Path to SQLite database

    Returns:
        Initialized PersistenceAdapter
    """
    global _persistence

    if _persistence is not None:
        return _persistence

    _persistence = PersistenceAdapter(db_path)
    logger.info(f"[Storage] SQLite database ready: {db_path}")
    return _persistence


def get_persistence() -> PersistenceAdapter:
    """
    Get the persistence singleton.

    Raises:
        RuntimeError: If persistence not initialized
    """
    if _persistence is None:
        raise RuntimeError(
            "Persistence not initialized. "
            "Ensure init_persistence() is called during startup."
        )

    return _persistence


def shutdown_persistence() -> None:
    """Drop the persistence singleton during FastAPI lifespan shutdown."""
    global _persistence
    _persistence = None
