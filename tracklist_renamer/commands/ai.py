"""AI command: rename files from Gemini's reading of the filenames."""

from __future__ import annotations

import os
from pathlib import Path

import click

from tracklist_renamer.ai import generate_ai_renames, parse_filenames_with_ai
from tracklist_renamer.cli import Context, pass_context
from tracklist_renamer.commands import EXIT_AI_ERROR
from tracklist_renamer.commands._common import fail, finish, load_local_tracks
from tracklist_renamer.config import save_config
from tracklist_renamer.exceptions import AIParseError, TemplateRenderError
from tracklist_renamer.naming import validate_format
from tracklist_renamer.utils.output import error, info, success, warning

API_KEY_ENV = "GEMINI_API_KEY"


@click.command("ai")
@click.argument("folder", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--api-key",
    default=None,
    help=f"Gemini API key (default: from config, then ${API_KEY_ENV})",
)
@click.option(
    "--save-key",
    is_flag=True,
    default=False,
    help="Store the --api-key value in the config file",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    default=None,
    help='Naming format: "Track. Artist - Title", "Track. Title" or a Jinja2 '
    "template (default: from config)",
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
    api_key: str | None,
    save_key: bool,
    fmt: str | None,
    apply: bool,
    json_path: Path | None,
) -> None:
    """Let an AI model split filenames into artist, title and track number.

    All filenames in FOLDER are sent to the Gemini API in one request.
    Use this when the filenames are too irregular for the template
    parser and no store page is available.

    Examples:

    \b
      GEMINI_API_KEY=... tracklist-renamer ai ./Album

    \b
      tracklist-renamer ai ./Album --api-key KEY --save-key --apply
    """
    config = ctx.get_config()
    fmt = fmt if fmt is not None else config.naming_format
    try:
        validate_format(fmt)
    except TemplateRenderError as e:
        fail(e)

    if save_key:
        if not api_key:
            error("--save-key requires --api-key")
            raise SystemExit(1)
        config.ai_api_key = api_key
        save_config(config)
        success("Saved API key to config")

    key = api_key or config.ai_api_key or os.environ.get(API_KEY_ENV, "")
    if not key:
        error(
            "No Gemini API key configured",
            hint=f"Pass --api-key, set ai.api_key in the config or export {API_KEY_ENV}",
        )
        raise SystemExit(EXIT_AI_ERROR)

    local_tracks = load_local_tracks(folder)
    if not local_tracks:
        warning(f"No audio files found in {folder}")
        return

    if not ctx.quiet:
        info(f"Asking {config.ai_model} about {len(local_tracks)} file(s)...")
    try:
        parsed = parse_filenames_with_ai(
            [t.original_name for t in local_tracks], key, model=config.ai_model
        )
    except AIParseError as e:
        fail(e)

    results = generate_ai_renames(local_tracks, parsed, fmt)
    finish(results, apply=apply, json_path=json_path, quiet=ctx.quiet)
