"""Click-based CLI entry point for motionconv."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from motionconv import __version__
from motionconv.config import (
    CONFIG_FILE_EXTENSIONS,
    DEFAULT_WORKERS,
    EXIT_IO_FAILURE,
    EXIT_PARSE_FAILURE,
    EXIT_VALIDATION_FAILURE,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = {"error": logging.ERROR, "info": logging.INFO, "debug": logging.DEBUG}


def _check_config_extension(ctx, param, value: Path) -> Path:
    ext = value.suffix.lstrip(".").lower()
    if not ext:
        raise click.BadParameter("No file extension found")
    if ext not in CONFIG_FILE_EXTENSIONS:
        raise click.BadParameter(
            f"Invalid file extension '{ext}'. Expected one of: {', '.join(CONFIG_FILE_EXTENSIONS)}."
        )
    return value


@click.group()
@click.version_option(version=__version__)
def cli():
    """Convert strong-motion accelerograms to JMA CSV or STERA-3D TXT."""


@cli.command()
@click.option(
    "-i", "--input-file-path", "config_path", required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    callback=_check_config_extension,
    help="Conversion configuration (.toml, .yaml or .yml).",
)
@click.option(
    "-o", "--output-dir-path", "output_dir", required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for converted files (created if absent).",
)
@click.option("-l", "--log-level", type=click.Choice(list(LOG_LEVELS)), default="error", help="Logging verbosity.")
@click.option("--workers", type=click.IntRange(min=1), default=DEFAULT_WORKERS, help="Parallel extraction workers.")
def convert(config_path: Path, output_dir: Path, log_level: str, workers: int):
    """Convert the recordings listed in a configuration file."""
    from motionconv.errors import ConfigurationError, ValidationFailed
    from motionconv.parsers.config_parser import load_configuration, read_config_file
    from motionconv.storage.writer import run_conversion

    logging.basicConfig(level=LOG_LEVELS[log_level], format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        tree = read_config_file(config_path)
        config = load_configuration(tree, base_dir=config_path.resolve().parent)
    except ConfigurationError as e:
        for problem in e.problems:
            click.echo(f"  {problem}", err=True)
        click.echo(f"Invalid configuration {config_path}: {len(e.problems)} problem(s)", err=True)
        sys.exit(EXIT_PARSE_FAILURE)
    except OSError as e:
        click.echo(f"Cannot read {config_path}: {e}", err=True)
        sys.exit(EXIT_IO_FAILURE)
    logger.info("Loaded %d conversion(s) from %s", len(config.jobs), config_path)

    try:
        report = run_conversion(config, output_dir, workers=workers, progress=log_level != "error")
    except ValidationFailed as e:
        for violation in e.violations:
            click.echo(str(violation), err=True)
        click.echo(f"{len(e.violations)} configuration violation(s); nothing converted", err=True)
        sys.exit(EXIT_VALIDATION_FAILURE)
    except OSError as e:
        click.echo(f"Cannot prepare output directory {output_dir}: {e}", err=True)
        sys.exit(EXIT_IO_FAILURE)

    click.echo(report.summary())
    sys.exit(report.exit_code)


@cli.command()
def formats():
    """List supported source and target formats."""
    from motionconv.models.core import SourceFormat, TargetFormat

    click.echo("Source formats:")
    for source in SourceFormat:
        kind = "three files, one per axis" if source.is_multi_axis else "one file"
        click.echo(f"  {source.value:<16} .{', .'.join(source.acceptable_extensions()):<14} {kind}")
    click.echo("Target formats:")
    for target in TargetFormat:
        click.echo(f"  {target.value:<16} .{target.extension}")
