"""
Tests for logging_config module.
"""

import logging

import pytest

from src.infra.logging_config import LOGGER_NAME, DailyRotatingFileHandler, setup_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestDailyRotatingFileHandler:
    """Tests for DailyRotatingFileHandler class."""

    def test_handler_creates_log_directory(self, tmp_path):
        """Test that handler creates log directory if it doesn't exist."""
        log_dir = tmp_path / "new_logs" / "nested"
        assert not log_dir.exists()

        handler = DailyRotatingFileHandler(log_dir=str(log_dir))
        assert log_dir.exists()
        handler.close()

    def test_handler_creates_log_file(self, tmp_path):
        """Test that handler creates a log file with correct naming."""
        handler = DailyRotatingFileHandler(log_dir=str(tmp_path))

        log_files = list(tmp_path.glob("storybook_wizard_*.log"))
        assert len(log_files) == 1

        # storybook_wizard_YYYYMMDD_HHMMSS.log
        parts = log_files[0].stem.split("_")
        assert len(parts[-2]) == 8
        assert len(parts[-1]) == 6
        handler.close()

    def test_handler_emits_record(self, tmp_path):
        """Test that handler writes log records to file."""
        handler = DailyRotatingFileHandler(log_dir=str(tmp_path))
        handler.setFormatter(logging.Formatter('%(message)s'))

        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="Draft saved",
            args=(),
            exc_info=None
        )
        handler.emit(record)
        handler.close()

        log_files = list(tmp_path.glob("storybook_wizard_*.log"))
        assert "Draft saved" in log_files[0].read_text()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_returns_wizard_logger(self, clean_logger, tmp_path):
        logger = setup_logging("INFO", log_dir=str(tmp_path))

        assert isinstance(logger, logging.Logger)
        assert logger.name == "storybook_wizard"

    def test_sets_correct_log_level(self, clean_logger, tmp_path):
        logger = setup_logging("DEBUG", log_dir=str(tmp_path))
        assert logger.level == logging.DEBUG

        logger = setup_logging("WARNING", log_dir=str(tmp_path))
        assert logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, clean_logger, tmp_path):
        logger = setup_logging("LOUD", log_dir=str(tmp_path))
        assert logger.level == logging.INFO

    def test_adds_console_and_file_handlers(self, clean_logger, tmp_path):
        logger = setup_logging("INFO", log_dir=str(tmp_path))

        assert any(
            isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
            for h in logger.handlers
        )
        assert any(isinstance(h, DailyRotatingFileHandler) for h in logger.handlers)

    def test_repeated_setup_does_not_duplicate_handlers(self, clean_logger, tmp_path):
        setup_logging("INFO", log_dir=str(tmp_path))
        logger = setup_logging("INFO", log_dir=str(tmp_path))
        assert len(logger.handlers) == 2

    def test_prevents_propagation(self, clean_logger, tmp_path):
        logger = setup_logging("INFO", log_dir=str(tmp_path))
        assert logger.propagate is False
