"""Album folder scanning."""

from __future__ import annotations

import logging
from pathlib import Path

import mutagen
from mutagen import MutagenError

from tracklist_renamer.exceptions import ScanError
from tracklist_renamer.models import LocalTrack

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = frozenset({".flac", ".mp3", ".wav", ".aiff"})


def is_audio_file(path: Path) -> bool:
    return path.suffix.lower() in AUDIO_EXTENSIONS


def _first_tag(tags: object, key: str) -> str:
    try:
        values = tags[key]  # type: ignore[index]
    except (KeyError, ValueError):
        return ""
    if isinstance(values, list):
        return str(values[0]).strip() if values else ""
    return str(values).strip()


def read_tags(path: Path) -> tuple[str, str]:
    """Artist and title tags of an audio file; empty strings if unreadable."""
    try:
        audio = mutagen.File(path, easy=True)
    except (MutagenError, OSError, ValueError) as e:
        logger.debug("Cannot read tags from %s: %s", path.name, e)
        return "", ""
    if audio is None or not audio.tags:
        return "", ""
    return _first_tag(audio.tags, "artist"), _first_tag(audio.tags, "title")


def scan_folder(folder: Path) -> list[LocalTrack]:
    """List the audio files directly inside *folder*, sorted by name.

    Args:
        folder: Album directory. Subdirectories are not descended into.

    Returns:
        One LocalTrack per audio file, with tags when readable.

    Raises:
        ScanError: If the folder does not exist or cannot be listed.
    """
    if not folder.is_dir():
        raise ScanError(folder, "not a directory")
    try:
        entries = sorted(folder.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ScanError(folder, str(e)) from e

    tracks: list[LocalTrack] = []
    for entry in entries:
        if not entry.is_file() or not is_audio_file(entry):
            continue
        artist, title = read_tags(entry)
        tracks.append(
            LocalTrack(
                path=str(entry),
                original_name=entry.name,
                tag_artist=artist,
                tag_title=title,
            )
        )
    logger.debug("Found %d audio files in %s", len(tracks), folder)
    return tracks
