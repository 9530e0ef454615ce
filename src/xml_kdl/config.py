"""Settings and configuration loading for the converter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from xml_kdl.nodes import CANONICAL_ATTRIBUTE_ORDER

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None
    # Level for the log file, independent of the console
    file_level: str = "DEBUG"
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class KdlSettings:
    """KDL output formatting."""

    indent: str = "  "


@dataclass
class XmlSettings:
    """XML output formatting."""

    indent: str = "  "
    # Comments are dropped from XML output unless enabled.
    emit_comments: bool = False


@dataclass
class Settings:
    """Main settings container for the converter."""

    attribute_order: list[str] = field(
        default_factory=lambda: list(CANONICAL_ATTRIBUTE_ORDER)
    )
    kdl: KdlSettings = field(default_factory=KdlSettings)
    xml: XmlSettings = field(default_factory=XmlSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the settings YAML file.

        Returns:
            Settings instance populated from the file.

        Raises:
            FileNotFoundError: If the settings file doesn't exist.
            yaml.YAMLError: If the file contains invalid YAML.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        """Create Settings from a dictionary."""
        logging_data = data.get("logging", {})
        logging_settings = LoggingSettings(
            level=logging_data.get("level", "INFO"),
            file=logging_data.get("file"),
            file_level=logging_data.get("file_level", "DEBUG"),
            format=logging_data.get("format", DEFAULT_LOG_FORMAT),
        )

        kdl_data = data.get("kdl", {})
        kdl_settings = KdlSettings(indent=kdl_data.get("indent", "  "))

        xml_data = data.get("xml", {})
        xml_settings = XmlSettings(
            indent=xml_data.get("indent", "  "),
            emit_comments=xml_data.get("emit_comments", False),
        )

        return cls(
            attribute_order=list(
                data.get("attribute_order", CANONICAL_ATTRIBUTE_ORDER)
            ),
            kdl=kdl_settings,
            xml=xml_settings,
            logging=logging_settings,
        )

    @classmethod
    def default(cls) -> "Settings":
        """Create Settings with default values."""
        return cls()
