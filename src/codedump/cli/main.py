"""
codedump CLI - Main entry point.

    codedump [OUTPUT_FILE] [FOLDERS]...

Without FOLDERS the configured default folders are scanned.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from pydantic import BaseModel

from ..config import CONFIG_ENV_VAR, ConfigError, DumpConfig, load_config
from ..core.aggregator import Aggregator
from ..core.classifier import FileClassifier
from .utils import RULE, echo_error, echo_event, echo_success, setup_logging

logger = logging.getLogger(__name__)


class DumpSummary(BaseModel):
    """
    Structured response for ``--json`` output.
    """
    files_processed: int
    files_skipped_binary: int
    files_unreadable: int
    folders_scanned: int
    folders_skipped: List[str]
    output_path: str


def resolve_folders(cli_folders: Tuple[str, ...], config: DumpConfig) -> Tuple[List[str], bool]:
    """
    Pick the folders to scan.

    Returns:
        The folder list and whether it came from the command line.
    """
    if cli_folders:
        return list(cli_folders), True
    return list(config.default_folders), False


@click.command()
@click.argument("output_file", required=False)
@click.argument("folders", nargs=-1)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar=CONFIG_ENV_VAR,
    help="YAML config file (default: .codedump/config.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON summary instead of progress")
@click.version_option(package_name="codedump")
def main(
    output_file: Optional[str],
    folders: Tuple[str, ...],
    config_path: Optional[Path],
    verbose: bool,
    as_json: bool,
):
    """
    Aggregate code files from FOLDERS into OUTPUT_FILE.

    Each file is written as its path relative to the current directory,
    followed by its contents and two blank lines.

    \b
    Examples:
      codedump
      codedump dump.txt src docs
    """
    setup_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)

    output_path = Path(output_file or config.output_file)
    scan_folders, from_cli = resolve_folders(folders, config)

    if not as_json:
        if from_cli:
            click.echo("Using command-line specified folders")
        else:
            click.echo("Using default configured folders")
            click.echo(
                "Tip: You can override by specifying folders: "
                "codedump [output_file] folder1 folder2 ..."
            )
        click.echo("Starting code aggregation...")
        click.echo(f"Folders to scan: {' '.join(scan_folders)}")
        click.echo(f"Output file: {output_path.resolve()}")
        click.echo(RULE)

    aggregator = Aggregator(
        output_path,
        classifier=FileClassifier(config.code_extensions, config.include_files),
        on_event=None if as_json else echo_event,
    )

    try:
        stats = aggregator.run(scan_folders)
    except OSError as e:
        logger.debug("Aggregation failed", exc_info=True)
        echo_error(f"Cannot write output file {output_path}: {e.strerror or e}")
        sys.exit(1)

    if as_json:
        summary = DumpSummary(
            files_processed=stats.files_written,
            files_skipped_binary=stats.files_skipped_binary,
            files_unreadable=stats.files_unreadable,
            folders_scanned=stats.folders_scanned,
            folders_skipped=stats.folders_skipped,
            output_path=stats.output_path,
        )
        click.echo(summary.model_dump_json(indent=2))
        return

    click.echo(RULE)
    echo_success("Code aggregation completed!")
    click.echo(f"Processed {stats.files_written} files")
    click.echo(f"Output written to: {stats.output_path}")


if __name__ == "__main__":
    main()
