"""Convert files between XML and KDL."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from xml_kdl.config import Settings
from xml_kdl.errors import UnsupportedFormatError
from xml_kdl.kdl_reader import KdlReader
from xml_kdl.kdl_writer import KdlWriter
from xml_kdl.nodes import Document
from xml_kdl.xml_importer import XmlImporter
from xml_kdl.xml_writer import XmlWriter

logger = logging.getLogger(__name__)

XML_SUFFIX = ".xml"
KDL_SUFFIX = ".kdl"

# Each format converts to the other.
TARGET_SUFFIX = {XML_SUFFIX: KDL_SUFFIX, KDL_SUFFIX: XML_SUFFIX}


@dataclass
class ConversionResult:
    """Result of converting a single file."""

    source: Path
    output: Path
    node_count: int
    conversion_time_ms: int = 0


class Converter:
    """Loads and writes documents, choosing the format by file extension."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.default()
        self.xml_importer = XmlImporter()
        self.kdl_reader = KdlReader()
        self.xml_writer = XmlWriter(self.settings)
        self.kdl_writer = KdlWriter(self.settings)

    def load(self, path: str | Path) -> Document:
        """Read a .xml or .kdl file into a Document.

        Raises:
            UnsupportedFormatError: If the extension is not .xml or .kdl.
            XmlDecodeError: If the XML is malformed.
            NotationParseError: If the KDL is malformed.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in TARGET_SUFFIX:
            raise UnsupportedFormatError(f"unsupported input file extension: {path.suffix}")

        with open(path, "rb") as f:
            if suffix == XML_SUFFIX:
                return self.xml_importer.parse(f)
            return self.kdl_reader.parse(f)

    def dump(self, document: Document, path: str | Path) -> None:
        """Write a Document to a .xml or .kdl file.

        Output goes to a temporary file next to the destination which is
        renamed into place once complete.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == XML_SUFFIX:
            text = self.xml_writer.dumps(document)
        elif suffix == KDL_SUFFIX:
            text = self.kdl_writer.dumps(document)
        else:
            raise UnsupportedFormatError(f"unsupported output file extension: {path.suffix}")

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp_name, path)
        finally:
            # Only left behind if writing or renaming failed
            Path(tmp_name).unlink(missing_ok=True)

    def convert_file(self, source: str | Path, output: str | Path) -> ConversionResult:
        """Convert one file, inferring both formats from the extensions."""
        start_time = time.time()
        source = Path(source)
        output = Path(output)

        document = self.load(source)
        self.dump(document, output)

        conversion_time_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Converted {source} -> {output} in {conversion_time_ms}ms")

        return ConversionResult(
            source=source,
            output=output,
            node_count=document.node_count,
            conversion_time_ms=conversion_time_ms,
        )


def output_path_for(source: str | Path, out_dir: str | Path) -> Path:
    """Output path in out_dir for source, with the other format's extension.

    Raises:
        UnsupportedFormatError: If source is not a .xml or .kdl file.
    """
    source = Path(source)
    suffix = source.suffix.lower()
    if suffix not in TARGET_SUFFIX:
        raise UnsupportedFormatError(f"unsupported input file extension: {source.suffix}")
    return Path(out_dir) / f"{source.stem}{TARGET_SUFFIX[suffix]}"
