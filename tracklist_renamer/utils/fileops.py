"""File helpers for config and report output."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from tracklist_renamer.models import MatchedTrack


def secure_mkdir(path: Path) -> None:
    """Create directory with 0o700 permissions (owner-only access).

    If the directory already exists, its permissions are tightened to 0o700.
    Parent directories are created as needed.
    """
    path.mkdir(parents=True, exist_ok=True)
    path.chmod(0o700)


def write_json_report(path: Path, tracks: Iterable[MatchedTrack]) -> None:
    """Write proposed renames as a JSON array of camelCase records."""
    payload = [track.to_dict() for track in tracks]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
