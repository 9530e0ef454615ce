"""Batch conversion of files and directories."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from xml_kdl.config import Settings
from xml_kdl.converter import TARGET_SUFFIX, Converter, output_path_for

logger = logging.getLogger(__name__)


@dataclass
class FileConversionReport:
    """Detailed report for a single file conversion."""

    source: str
    output: str
    status: Literal["success", "failed"]
    errors: list[str] = field(default_factory=list)
    node_count: int = 0
    conversion_time_ms: int = 0


@dataclass
class BatchResult:
    """Result of a full batch run."""

    files_converted: int
    files_failed: int
    total_time_ms: int
    file_reports: list[FileConversionReport] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no file failed."""
        return self.files_failed == 0


class BatchConverter:
    """Converts a single file or every convertible file in a directory."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.default()
        self.converter = Converter(self.settings)

    def convert(self, source: str | Path, destination: str | Path) -> BatchResult:
        """Convert source into destination.

        Args:
            source: A .xml/.kdl file, or a directory of them.
            destination: Output file path, or output directory. A directory
                is created if missing when source is a directory.

        Returns:
            BatchResult with conversion statistics and reports.

        Raises:
            FileNotFoundError: If source doesn't exist.
        """
        start_time = time.time()
        source = Path(source)
        destination = Path(destination)

        if not source.exists():
            raise FileNotFoundError(f"Input not found: {source}")

        if source.is_dir():
            destination.mkdir(parents=True, exist_ok=True)
            jobs = [
                (path, output_path_for(path, destination))
                for path in self._find_inputs(source)
            ]
            logger.info(f"Found {len(jobs)} files to convert in {source}")
        elif destination.is_dir():
            # Unknown extensions keep their suffix and fail in the converter
            suffix = TARGET_SUFFIX.get(source.suffix.lower(), source.suffix)
            jobs = [(source, destination / f"{source.stem}{suffix}")]
        else:
            jobs = [(source, destination)]

        reports = [self._convert_file(src, dst) for src, dst in jobs]
        files_failed = sum(1 for r in reports if r.status == "failed")
        total_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Conversion complete: {len(reports) - files_failed} files converted, "
            f"{files_failed} failed, {total_time_ms}ms"
        )

        return BatchResult(
            files_converted=len(reports) - files_failed,
            files_failed=files_failed,
            total_time_ms=total_time_ms,
            file_reports=reports,
        )

    def _find_inputs(self, directory: Path) -> list[Path]:
        """Regular .xml/.kdl files directly inside directory, sorted by name."""
        return sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix.lower() in TARGET_SUFFIX
        )

    def _convert_file(self, source: Path, output: Path) -> FileConversionReport:
        """Convert a single file, turning any failure into a failed report."""
        start_time = time.time()
        logger.debug(f"Converting: {source}")

        try:
            result = self.converter.convert_file(source, output)
        except Exception as e:
            logger.error(f"Failed to convert {source}: {e}")
            return FileConversionReport(
                source=str(source),
                output=str(output),
                status="failed",
                errors=[str(e)],
                conversion_time_ms=int((time.time() - start_time) * 1000),
            )

        return FileConversionReport(
            source=str(source),
            output=str(output),
            status="success",
            node_count=result.node_count,
            conversion_time_ms=result.conversion_time_ms,
        )
