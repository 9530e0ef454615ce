"""Logging setup for conversion runs."""

import logging
import sys
from pathlib import Path

from xml_kdl.config import LoggingSettings, Settings

PACKAGE_LOGGER = "xml_kdl"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def console_level(log_settings: LoggingSettings, verbose: bool, quiet: bool) -> int:
    """Level for messages printed to stderr.

    --verbose wins over --quiet. Quiet runs show only warnings and per-file
    failures.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return max(_level(log_settings.level), logging.WARNING)
    return _level(log_settings.level)


def setup_logging(
    settings: Settings, verbose: bool = False, quiet: bool = False
) -> logging.Logger:
    """Configure the package logger for a conversion run.

    Console output follows the configured level, --verbose or --quiet. The
    optional log file has its own level, so a run can keep a per-file DEBUG
    trail on disk while stderr stays terse.

    Returns:
        The configured package logger.
    """
    log_settings = settings.logging
    formatter = logging.Formatter(log_settings.format)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level(log_settings, verbose, quiet))
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_settings.file:
        log_path = Path(log_settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(_level(log_settings.file_level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # The logger passes everything any handler wants; handlers filter.
    logger.setLevel(min(handler.level for handler in logger.handlers))

    return logger
