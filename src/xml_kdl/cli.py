"""Click CLI entry point for the converter."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from xml_kdl.batch import BatchConverter
from xml_kdl.config import Settings
from xml_kdl.logging_config import setup_logging


@click.command()
@click.argument("src_path", type=click.Path(exists=True, path_type=Path))
@click.argument("out_path", type=click.Path(path_type=Path))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
def cli(
    src_path: Path,
    out_path: Path,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Convert between XML and KDL.

    SRC_PATH: a .xml or .kdl file, or a directory of them

    OUT_PATH: output file, or output directory for a directory input
    """
    settings = Settings.load(config_path) if config_path else Settings.default()
    setup_logging(settings, verbose=verbose, quiet=quiet)

    result = BatchConverter(settings).convert(src_path, out_path)

    for report in result.file_reports:
        if report.status == "failed":
            click.echo(f"Failed to convert {report.source}: {report.errors[0]}", err=True)
        elif verbose:
            click.echo(f"  Converted: {report.source} -> {report.output}")

    click.echo(
        f"Converted {result.files_converted} files "
        f"in {result.total_time_ms / 1000:0.2f} seconds"
    )
    if result.files_failed:
        click.echo(f"{result.files_failed} files failed", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
