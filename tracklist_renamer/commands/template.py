"""Template command: rename files from their own names and tags."""

from __future__ import annotations

from pathlib import Path

import click

from tracklist_renamer.cli import Context, pass_context
from tracklist_renamer.commands._common import fail, finish, load_local_tracks
from tracklist_renamer.engine.template import generate_template_renames
from tracklist_renamer.exceptions import TemplateRenderError
from tracklist_renamer.naming import validate_format
from tracklist_renamer.utils.output import warning


@click.command("template")
@click.argument("folder", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "fmt",
    default=None,
    help='Naming format: "Track. Artist - Title", "Track. Title" or a Jinja2 '
    "template using track, artist, title and bpm (default: from config)",
)
@click.option(
    "--apply",
    is_flag=True,
    default=False,
    help="Rename the files (default: only show proposed names)",
)
@click.option(
    "--json",
    "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write proposed renames as JSON to this file",
)
@pass_context
def cli(
    ctx: Context,
    folder: Path,
    fmt: str | None,
    apply: bool,
    json_path: Path | None,
) -> None:
    """Guess clean names from messy filenames without a store page.

    Each filename is parsed on its own: leading track numbers, label
    prefixes, catalog codes and BPM markers are recognized, and embedded
    tags are preferred when they agree with the filename.

    Examples:

    \b
      tracklist-renamer template ./Album

    \b
      tracklist-renamer template ./Album --format "Track. Title" --apply

    \b
      tracklist-renamer template ./Album --format "{{ artist }} - {{ title }}"
    """
    config = ctx.get_config()
    fmt = fmt if fmt is not None else config.naming_format
    try:
        validate_format(fmt)
    except TemplateRenderError as e:
        fail(e)

    local_tracks = load_local_tracks(folder)
    if not local_tracks:
        warning(f"No audio files found in {folder}")
        return

    results = generate_template_renames(local_tracks, fmt)
    finish(results, apply=apply, json_path=json_path, quiet=ctx.quiet)
