"""Match command: rename an album folder from its store track listing."""

from __future__ import annotations

from pathlib import Path

import click

from tracklist_renamer.cli import Context, pass_context
from tracklist_renamer.commands._common import fail, finish, load_local_tracks
from tracklist_renamer.engine.matcher import match_album
from tracklist_renamer.exceptions import TracklistRenamerError
from tracklist_renamer.models import LocalTrack, MatchedTrack
from tracklist_renamer.stores import fetch_album_data, is_beatport_url
from tracklist_renamer.utils.output import info, verbose, warning


def _with_unmatched(local_tracks: list[LocalTrack], matched: list[MatchedTrack]) -> list[MatchedTrack]:
    """Matches in folder order, plus "No Match" rows for unclaimed files."""
    by_path = {m.local_path: m for m in matched}
    return [by_path.get(t.path) or MatchedTrack.unmatched(t) for t in local_tracks]


@click.command("match")
@click.argument("folder", type=click.Path(file_okay=False, path_type=Path))
@click.argument("url")
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
@click.option(
    "--min-confidence",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Minimum similarity for a store track to claim a file "
    "(default: 0.25 on Beatport from config, 0 on Bandcamp)",
)
@pass_context
def cli(
    ctx: Context,
    folder: Path,
    url: str,
    apply: bool,
    json_path: Path | None,
    min_confidence: float | None,
) -> None:
    """Rename audio files from a Bandcamp or Beatport track listing.

    Fetches the album or release page at URL, matches its track list
    against the audio files in FOLDER and proposes "NN. Artist - Title"
    names. Files are only renamed with --apply.

    Examples:

    \b
      # Preview
      tracklist-renamer match ./Album https://artist.bandcamp.com/album/name

    \b
      # Rename using a Beatport release
      tracklist-renamer match ./Album https://www.beatport.com/release/name/123456 --apply
    """
    config = ctx.get_config()
    local_tracks = load_local_tracks(folder)
    if not local_tracks:
        warning(f"No audio files found in {folder}")
        return

    if min_confidence is None and is_beatport_url(url):
        min_confidence = config.beatport_min_confidence

    client = ctx.store_client()
    try:
        album = fetch_album_data(url, client)
    except TracklistRenamerError as e:
        fail(e)

    if not ctx.quiet:
        info(f"{album.source}: {album.artist or 'Unknown artist'} - {album.title or 'Unknown release'}")
    verbose(f"{len(album.tracks)} tracks in listing, {len(local_tracks)} local files")

    matched = match_album(album, local_tracks, min_confidence=min_confidence)
    verbose(f"Matched {len(matched)} of {len(local_tracks)} files")

    finish(
        _with_unmatched(local_tracks, matched),
        apply=apply,
        json_path=json_path,
        quiet=ctx.quiet,
        title=album.title or None,
    )
