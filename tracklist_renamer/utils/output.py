"""Rich console output helpers for tracklist-renamer."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from tracklist_renamer.models import MatchedTrack

# Module-level verbosity flags (set by cli.py after argument parsing)
_verbose_enabled: bool = False

THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "rename.old": "dim",
        "rename.new": "bold",
        "rename.unchanged": "dim italic",
        "confidence.high": "green",
        "confidence.mid": "yellow",
        "confidence.low": "red",
    }
)

# Global console instances
console = Console(theme=THEME, stderr=False)
error_console = Console(theme=THEME, stderr=True)

_LOG_HANDLER_NAME = "tracklist-renamer"


def set_verbosity(*, verbose: bool = False, debug: bool = False) -> None:
    """Configure module-level verbosity flags and library log level.

    Called from the CLI entry point after argument parsing.
    """
    global _verbose_enabled
    _verbose_enabled = verbose or debug  # debug implies verbose
    setup_logging(logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING)


def setup_logging(level: int) -> None:
    """Route the package loggers to stderr through rich."""
    logger = logging.getLogger("tracklist_renamer")
    for handler in list(logger.handlers):
        if handler.get_name() == _LOG_HANDLER_NAME:
            logger.removeHandler(handler)
    handler = RichHandler(console=error_console, show_path=False, show_time=False)
    handler.set_name(_LOG_HANDLER_NAME)
    logger.addHandler(handler)
    logger.setLevel(level)


def set_color(enabled: bool) -> None:
    """Enable or disable color on both console instances."""
    console.no_color = not enabled
    error_console.no_color = not enabled


def info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/info]")


def warning(message: str) -> None:
    """Print a warning message to stderr."""
    error_console.print(f"[warning]Warning:[/warning] {escape(message)}")


def error(message: str, hint: str | None = None) -> None:
    """Print an error message to stderr.

    Args:
        message: The error message.
        hint: Optional hint for resolution.
    """
    error_console.print(f"[error]Error:[/error] {escape(message)}")
    if hint:
        error_console.print(f"  [info]Hint:[/info] {escape(hint)}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/success]")


def verbose(message: str) -> None:
    """Print a message only when verbose mode is enabled."""
    if _verbose_enabled:
        console.print(f"[info]{escape(message)}[/info]")


def create_table(title: str | None = None, **kwargs: Any) -> Table:
    """Create a styled table.

    Args:
        title: Optional table title.
        **kwargs: Additional Table arguments.

    Returns:
        Rich Table instance.
    """
    return Table(title=title, **kwargs)


def _confidence_style(confidence: float) -> str:
    if confidence >= 0.75:
        return "confidence.high"
    if confidence >= 0.4:
        return "confidence.mid"
    return "confidence.low"


def print_rename_table(tracks: Iterable[MatchedTrack], title: str | None = None) -> None:
    """Print proposed renames as a table of old name, new name, confidence and status."""
    table = create_table(title=title)
    table.add_column("Original", style="rename.old", overflow="fold")
    table.add_column("Proposed", overflow="fold")
    table.add_column("Conf.", justify="right")
    table.add_column("Status")

    for track in tracks:
        if track.changed:
            proposed = f"[rename.new]{escape(track.proposed_name)}[/rename.new]"
        else:
            proposed = "[rename.unchanged](unchanged)[/rename.unchanged]"
        style = _confidence_style(track.confidence)
        table.add_row(
            escape(track.original_name),
            proposed,
            f"[{style}]{track.confidence:.2f}[/{style}]",
            track.status,
        )
    console.print(table)
