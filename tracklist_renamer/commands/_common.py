"""Shared plumbing for the rename commands."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from tracklist_renamer.commands import (
    EXIT_AI_ERROR,
    EXIT_CONFIG_ERROR,
    EXIT_FETCH_ERROR,
    EXIT_PARSE_ERROR,
    EXIT_SCAN_ERROR,
)
from tracklist_renamer.exceptions import (
    AIParseError,
    AlbumDataError,
    FetchError,
    ScanError,
    TracklistRenamerError,
)
from tracklist_renamer.models import LocalTrack, MatchedTrack
from tracklist_renamer.renamer import rename_matched_tracks
from tracklist_renamer.scanner import scan_folder
from tracklist_renamer.utils.fileops import write_json_report
from tracklist_renamer.utils.output import error, info, print_rename_table, success, verbose

_EXIT_CODES: list[tuple[type[TracklistRenamerError], int]] = [
    (ScanError, EXIT_SCAN_ERROR),
    (FetchError, EXIT_FETCH_ERROR),
    (AlbumDataError, EXIT_PARSE_ERROR),
    (AIParseError, EXIT_AI_ERROR),
]

_HINTS: dict[type[TracklistRenamerError], str] = {
    FetchError: "Check the URL and your network connection",
    AlbumDataError: "Make sure the URL points to a Bandcamp album or Beatport release page",
}


def exit_code_for(exc: TracklistRenamerError) -> int:
    """CLI exit code for a failed operation."""
    for exc_type, code in _EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return EXIT_CONFIG_ERROR


def fail(exc: TracklistRenamerError) -> NoReturn:
    """Report *exc* and exit with its mapped code."""
    hint = next((h for t, h in _HINTS.items() if isinstance(exc, t)), None)
    error(str(exc), hint=hint)
    raise SystemExit(exit_code_for(exc)) from exc


def load_local_tracks(folder: Path) -> list[LocalTrack]:
    """Scan *folder*, exiting with the scan error code on failure."""
    try:
        tracks = scan_folder(folder)
    except ScanError as e:
        fail(e)
    verbose(f"Found {len(tracks)} audio files in {folder}")
    return tracks


def finish(
    results: Sequence[MatchedTrack],
    *,
    apply: bool,
    json_path: Path | None,
    quiet: bool,
    title: str | None = None,
) -> None:
    """Show, export and optionally apply proposed renames."""
    if not quiet:
        print_rename_table(results, title=title)

    if json_path is not None:
        write_json_report(json_path, results)
        info(f"Proposed renames written to {json_path}")

    pending = [r for r in results if r.changed]
    if not pending:
        if not quiet:
            info("Nothing to rename.")
        return

    if not apply:
        if not quiet:
            info(f"{len(pending)} file(s) would be renamed. Re-run with --apply to rename.")
        return

    renamed = rename_matched_tracks(pending)
    success(f"Renamed {renamed} of {len(pending)} file(s)")
