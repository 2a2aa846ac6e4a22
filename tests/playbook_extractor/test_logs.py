"""
Test specifications for Logging Setup

Acceptance Criteria:
- The package logger gets one console handler per configuration call
- A log directory adds a rotating JSON-line file

Edge Cases:
- Unknown level names raise ValueError
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from playbook_extractor.logs import LOG_FILE_NAME, PACKAGE_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestConfigureLogging:
    """Handler setup on the package logger."""

    def test_console_only(self):
        """Without a log directory only the console handler is installed."""
        logger = configure_logging("debug")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_reconfigure_replaces_handlers(self):
        """Calling twice does not stack handlers."""
        configure_logging()
        logger = configure_logging()
        assert len(logger.handlers) == 1

    def test_rotating_file(self, tmp_path):
        """A log directory gets a JSON-line log file."""
        logger = configure_logging(logging.INFO, log_dir=tmp_path / "logs")
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)

        logging.getLogger(f"{PACKAGE_LOGGER}.pipeline").info("parsed document")
        for handler in logger.handlers:
            handler.flush()

        content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
        assert '"level": "INFO"' in content
        assert '"message": "parsed document"' in content

    def test_unknown_level(self):
        """Unknown level names are rejected."""
        with pytest.raises(ValueError):
            configure_logging("chatty")
