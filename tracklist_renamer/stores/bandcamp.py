"""Bandcamp album page extraction.

Bandcamp album and track pages carry the whole release as JSON in the
``data-tralbum`` attribute of a script tag: album artist, the current
release title and a ``trackinfo`` array with explicit track numbers.
"""

from __future__ import annotations

import json
from typing import Any

from bs4 import BeautifulSoup

from tracklist_renamer.exceptions import AlbumDataDecodeError, AlbumDataNotFoundError
from tracklist_renamer.models import AlbumData, AlbumTrack
from tracklist_renamer.stores._json import get_str, parse_artists, parse_int

SOURCE = "Bandcamp"


def extract_tralbum(html: str, url: str = "") -> dict[str, Any]:
    """Extract and decode the ``data-tralbum`` JSON from a Bandcamp page.

    Args:
        html: Raw HTML content of the page.
        url: URL of the page (for error reporting).

    Returns:
        Parsed JSON dictionary.

    Raises:
        AlbumDataNotFoundError: If the page has no tralbum data.
        AlbumDataDecodeError: If the data is not a JSON object.
    """
    soup = BeautifulSoup(html, "html.parser")
    script = soup.select_one("script[data-tralbum]")
    data = script.get("data-tralbum") if script is not None else None
    if not data:
        raise AlbumDataNotFoundError(url, "Could not find album data on page", html[:500])

    try:
        blob = json.loads(data)  # type: ignore[arg-type]
    except json.JSONDecodeError as e:
        raise AlbumDataDecodeError(
            url, f"Failed to unmarshal album data: {e}", str(data)[:500]
        ) from e

    if not isinstance(blob, dict):
        raise AlbumDataDecodeError(
            url,
            f"Failed to unmarshal album data: expected object, got {type(blob).__name__}",
            str(data)[:500],
        )
    return blob


def parse_album_page(html: str, url: str = "") -> AlbumData:
    """Build AlbumData from a Bandcamp album or track page."""
    blob = extract_tralbum(html, url)

    trackinfo = blob.get("trackinfo") or []
    if not isinstance(trackinfo, list):
        raise AlbumDataDecodeError(
            url,
            f"Failed to unmarshal album data: trackinfo is {type(trackinfo).__name__}",
            str(trackinfo)[:500],
        )

    tracks: list[AlbumTrack] = []
    for position, item in enumerate(trackinfo, start=1):
        if not isinstance(item, dict):
            continue
        track_num = parse_int(item.get("track_num"))
        tracks.append(
            AlbumTrack(
                title=get_str(item, "title"),
                artist=parse_artists(item.get("artist")),
                # Single-track pages leave track_num null
                track_num=track_num or position,
                track_num_explicit=True,
            )
        )

    current = blob.get("current")
    return AlbumData(
        artist=get_str(blob, "artist"),
        title=get_str(current, "title") if isinstance(current, dict) else "",
        tracks=tracks,
        source=SOURCE,
    )
