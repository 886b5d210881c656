"""
CLI Utilities - Shared helper functions for command line output.

Formatted console messages and logging setup used by the ``codedump``
command.
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from ..core.aggregator import EventKind

RULE = "-" * 40


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  Warning: {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(f"   {message}", dim=True))


def echo_event(kind: EventKind, message: str) -> None:
    """Render an aggregator progress event."""
    if kind == EventKind.SCAN:
        click.echo(click.style(message, bold=True))
    elif kind == EventKind.WARNING:
        echo_warning(message)
    elif kind == EventKind.SKIP:
        echo_info(message)
    else:
        click.echo(message)


def setup_logging(verbose: bool = False) -> None:
    """Route library logging to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
