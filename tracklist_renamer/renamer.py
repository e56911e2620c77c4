"""Apply proposed renames on disk."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from tracklist_renamer.models import MatchedTrack

logger = logging.getLogger(__name__)


def rename_matched_tracks(tracks: Iterable[MatchedTrack]) -> int:
    """Rename each file to its proposed name within the same directory.

    Entries with an unchanged name are skipped. An existing destination
    or a failed rename is logged and skipped; earlier renames are kept.

    Returns:
        Number of files renamed.
    """
    renamed = 0
    for track in tracks:
        if not track.changed:
            continue
        src = Path(track.local_path)
        dest = src.with_name(track.proposed_name)
        if dest.exists():
            logger.warning("Skipping %s: %s already exists", track.original_name, dest.name)
            continue
        try:
            src.rename(dest)
        except OSError as e:
            logger.warning("Failed to rename %s: %s", track.original_name, e)
            continue
        logger.info("Renamed %s -> %s", track.original_name, dest.name)
        renamed += 1
    return renamed
