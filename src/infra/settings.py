"""
Wizard settings loaded from environment variables.

Environment Variables:
- WIZARD_AUTOSAVE_INTERVAL_SECONDS: Seconds between draft autosaves (default: 60)
- WIZARD_AUTOSAVE_ENABLED: Enable background autosave (default: true)
- WIZARD_DB_PATH: SQLite database for characters and drafts (default: data/wizard.sqlite)
- GENERATION_SERVICE_URL: Base URL of the book generation service
- GENERATION_TIMEOUT_SECONDS: Timeout for the generation request (default: 120)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_DIR: Directory for daily log files (default: logs)
"""

import logging
import os
from dataclasses import dataclass, replace

logger = logging.getLogger("storybook_wizard")


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    val = os.getenv(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    elif val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_float(key: str, default: float) -> float:
    """Get float value from environment variable."""
    val = os.getenv(key)
    if val is not None:
        try:
            return float(val)
        except ValueError:
            logger.warning(f"[Settings] Invalid number for {key}: {val}, using default: {default}")
    return default


@dataclass(frozen=True)
class WizardSettings:
    """Runtime configuration for wizard sessions and the API."""

    autosave_interval: float = 60.0
    autosave_enabled: bool = True
    db_path: str = "data/wizard.sqlite"
    generation_service_url: str = "http://localhost:5000"
    generation_timeout: float = 120.0
    log_level: str = "INFO"
    log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "WizardSettings":
        """Load settings from environment variables."""
        settings = cls(
            autosave_interval=_get_env_float("WIZARD_AUTOSAVE_INTERVAL_SECONDS", cls.autosave_interval),
            autosave_enabled=_get_env_bool("WIZARD_AUTOSAVE_ENABLED", cls.autosave_enabled),
            db_path=os.getenv("WIZARD_DB_PATH", cls.db_path),
            generation_service_url=os.getenv("GENERATION_SERVICE_URL", cls.generation_service_url),
            generation_timeout=_get_env_float("GENERATION_TIMEOUT_SECONDS", cls.generation_timeout),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            log_dir=os.getenv("LOG_DIR", cls.log_dir),
        )
        if settings.autosave_interval <= 0:
            logger.warning(
                f"[Settings] Non-positive autosave interval {settings.autosave_interval}, "
                f"autosave disabled"
            )
            settings = replace(settings, autosave_interval=cls.autosave_interval, autosave_enabled=False)
        return settings
