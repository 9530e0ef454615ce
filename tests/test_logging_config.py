"""Tests for logging setup."""

import logging
import tempfile
from pathlib import Path

import pytest

from xml_kdl.config import LoggingSettings, Settings
from xml_kdl.logging_config import PACKAGE_LOGGER, console_level, setup_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers added by a test so files are closed."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestConsoleLevel:
    """Tests for choosing the console level."""

    def test_configured_level(self) -> None:
        """Without flags the configured level is used."""
        assert console_level(LoggingSettings(level="INFO"), False, False) == logging.INFO

    def test_verbose(self) -> None:
        """--verbose forces DEBUG."""
        assert console_level(LoggingSettings(), True, False) == logging.DEBUG

    def test_quiet(self) -> None:
        """--quiet raises the level to WARNING."""
        assert console_level(LoggingSettings(level="DEBUG"), False, True) == logging.WARNING

    def test_quiet_keeps_stricter_level(self) -> None:
        """--quiet never lowers a stricter configured level."""
        assert console_level(LoggingSettings(level="ERROR"), False, True) == logging.ERROR

    def test_verbose_wins(self) -> None:
        """--verbose takes precedence over --quiet."""
        assert console_level(LoggingSettings(), True, True) == logging.DEBUG

    def test_unknown_level(self) -> None:
        """Unknown level names fall back to INFO."""
        assert console_level(LoggingSettings(level="chatty"), False, False) == logging.INFO


class TestSetupLogging:
    """Tests for handler configuration."""

    def test_console_only(self) -> None:
        """Default settings add one stderr handler at INFO."""
        logger = setup_logging(Settings.default())

        assert logger.name == PACKAGE_LOGGER
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.INFO
        assert logger.level == logging.INFO

    def test_reconfigure_replaces_handlers(self) -> None:
        """Calling setup twice doesn't duplicate handlers."""
        setup_logging(Settings.default())
        logger = setup_logging(Settings.default(), quiet=True)

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING

    def test_file_gets_debug_trail(self) -> None:
        """The log file records per-file detail the console hides."""
        with tempfile.TemporaryDirectory() as tmpdir:
            settings = Settings.default()
            settings.logging.file = str(Path(tmpdir) / "logs" / "run.log")

            logger = setup_logging(settings, quiet=True)
            logging.getLogger(f"{PACKAGE_LOGGER}.batch").debug("Converting: items.xml")
            for handler in logger.handlers:
                handler.flush()

            file_handler = logger.handlers[1]
            assert isinstance(file_handler, logging.FileHandler)
            assert file_handler.level == logging.DEBUG
            assert logger.handlers[0].level == logging.WARNING
            assert logger.level == logging.DEBUG
            assert "Converting: items.xml" in Path(settings.logging.file).read_text()

            # Close the file before the directory is removed
            logger.removeHandler(file_handler)
            file_handler.close()

    def test_file_level_setting(self) -> None:
        """file_level controls what reaches the log file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            settings = Settings.default()
            settings.logging.file = str(Path(tmpdir) / "run.log")
            settings.logging.file_level = "ERROR"

            logger = setup_logging(settings)
            logging.getLogger(f"{PACKAGE_LOGGER}.batch").warning("skipped")
            logging.getLogger(f"{PACKAGE_LOGGER}.batch").error("failed")

            file_handler = logger.handlers[1]
            logger.removeHandler(file_handler)
            file_handler.close()

            content = Path(settings.logging.file).read_text()
            assert "failed" in content
            assert "skipped" not in content
