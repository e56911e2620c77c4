"""Command-line interface for tracklist-renamer."""

from __future__ import annotations

import os
from pathlib import Path

import click

from tracklist_renamer import __version__
from tracklist_renamer.config import Config, load_config
from tracklist_renamer.exceptions import ConfigError
from tracklist_renamer.stores.client import StoreClient
from tracklist_renamer.utils.output import (
    error,
    set_color,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self.timeout: float | None = None
        self.user_agent: str | None = None

    def get_config(self) -> Config:
        """Loaded config, or defaults when the group callback did not run."""
        if self.config is None:
            self.config = Config()
        return self.config

    def store_client(self) -> StoreClient:
        """HTTP client for store pages, honoring command-line overrides."""
        config = self.get_config()
        return StoreClient(
            user_agent=self.user_agent or config.user_agent,
            timeout=self.timeout if self.timeout is not None else config.http_timeout,
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/tracklist-renamer/config.toml)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Store request timeout in seconds (overrides config)",
)
@click.option(
    "--user-agent",
    default=None,
    help="User-Agent header for store requests (overrides config)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="tracklist-renamer")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    timeout: float | None,
    user_agent: str | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """tracklist-renamer: Rename album folders from store track listings.

    Matches the audio files of a downloaded album against the track list
    of its Bandcamp or Beatport page and proposes consistent
    "NN. Artist - Title" names. Without a store page, names can be
    guessed from the filenames themselves or with an AI model.

    Nothing is renamed unless --apply is given.

    Examples:

    \b
        # Preview renames from a Bandcamp album
        tracklist-renamer match ~/Music/Album https://artist.bandcamp.com/album/name

    \b
        # Clean up names without a store page
        tracklist-renamer template ~/Music/Album --apply
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet
    app_ctx.timeout = timeout
    app_ctx.user_agent = user_agent

    # Configure module-level verbosity for output helpers and logging
    set_verbosity(verbose=verbose, debug=debug)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
    except ConfigError as e:
        error(str(e))
        ctx.exit(1)
        return

    app_ctx.config = loaded_config

    if not disable_color and not loaded_config.colored_output:
        set_color(False)

    # A missing config file is normal for init-config
    if not quiet and ctx.invoked_subcommand != "init-config":
        for warn in warnings:
            warning(warn)


@cli.command("help")
@click.argument("command", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Show help for a command."""
    group = cli
    for name in command:
        cmd = group.get_command(ctx, name)
        if cmd is None:
            error(f"Unknown command: {name}")
            ctx.exit(1)
            return
        if isinstance(cmd, click.Group):
            group = cmd
        else:
            click.echo(cmd.get_help(ctx))
            return
    click.echo(group.get_help(ctx))


def register_commands() -> None:
    """Register all commands from the commands package."""
    from tracklist_renamer.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
