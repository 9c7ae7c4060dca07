"""Tests for logging setup."""

import logging
from io import StringIO

import pytest
from rich.console import Console
from rich.logging import RichHandler

from core.exceptions import ConfigError
from core.logging import setup_logging


@pytest.fixture
def core_logger():
    logger = logging.getLogger("core")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:
    """Test routing core log records to a rich console."""

    def test_messages_reach_console(self, core_logger):
        """Should render messages from core modules on the console."""
        buffer = StringIO()
        setup_logging("INFO", console=Console(file=buffer, width=120))

        logging.getLogger("core.update").info("Processing: %s", "rails")
        logging.getLogger("core.update").debug("hidden")

        assert "Processing: rails" in buffer.getvalue()
        assert "hidden" not in buffer.getvalue()

    def test_repeated_setup_keeps_one_handler(self, core_logger):
        """Should replace the handler instead of stacking duplicates."""
        setup_logging("DEBUG", console=Console(file=StringIO()))
        setup_logging("DEBUG", console=Console(file=StringIO()))

        assert core_logger.level == logging.DEBUG
        assert len(core_logger.handlers) == 1
        assert isinstance(core_logger.handlers[0], RichHandler)

    def test_level_names_are_case_insensitive(self, core_logger):
        """Should accept lowercase level names."""
        setup_logging("warning", console=Console(file=StringIO()))

        assert core_logger.level == logging.WARNING

    def test_unknown_level_is_rejected(self, core_logger):
        """Should reject an unknown level name the same way config does."""
        with pytest.raises(ConfigError):
            setup_logging("LOUD", console=Console(file=StringIO()))

    def test_environment_is_not_read(self, core_logger, monkeypatch):
        """Should take its level from the argument, not GEMBUMP_LOG_LEVEL."""
        monkeypatch.setenv("GEMBUMP_LOG_LEVEL", "LOUD")
        setup_logging(console=Console(file=StringIO()))

        assert core_logger.level == logging.INFO
