"""
Infrastructure module - logging and environment settings.
"""

from .logging_config import setup_logging
from .settings import WizardSettings

__all__ = [
    # logging
    "setup_logging",
    # settings
    "WizardSettings",
]
