"""
User-visible transient notices.

Every notice pushed on the board is also written to the wizard log.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .entities import now_iso

logger = logging.getLogger("storybook_wizard")


class NoticeLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    level: NoticeLevel = NoticeLevel.INFO
    created_at: str = field(default_factory=now_iso)


class NoticeBoard:
    """Collects notices for the hosting UI to display and drain."""

    def __init__(self):
        self._notices: list[Notice] = []

    def info(self, title: str, description: str) -> Notice:
        notice = Notice(title=title, description=description)
        self._notices.append(notice)
        logger.info(f"[Notice] {title}: {description}")
        return notice

    def error(self, title: str, description: str) -> Notice:
        notice = Notice(title=title, description=description, level=NoticeLevel.ERROR)
        self._notices.append(notice)
        logger.warning(f"[Notice] {title}: {description}")
        return notice

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    def drain(self) -> list[Notice]:
        """Return pending notices and clear the board."""
        pending, self._notices = self._notices, []
        return pending

    def __len__(self) -> int:
        return len(self._notices)
