"""Helpers for reading loosely shaped JSON from store pages.

Store payloads are decoded with :mod:`json` into plain Python values
(``dict``, ``list``, ``str``, ``int``, ``float``, ``bool``, ``None``).
Nothing about their shape is trusted: every accessor checks the type it
finds and falls back to an empty value.
"""

from __future__ import annotations

import math
from typing import Any, Union
from urllib.parse import urlsplit

JSONValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]
JSONObject = dict[str, Any]

TRACK_NUMBER_KEYS = ("trackNumber", "track_number", "position", "number", "index", "trackNo")


def get_str(obj: JSONObject, *keys: str) -> str:
    """First string value among *keys*, stripped; "" if none."""
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str):
            return value.strip()
    return ""


def parse_int(*values: JSONValue) -> int:
    """First value that reads as a positive integer; 0 if none does."""
    for value in values:
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            if value > 0:
                return value
        elif isinstance(value, float):
            if 0 < value < math.inf:
                return int(value)
        elif isinstance(value, str):
            text = value.strip()
            if text.isdecimal() and int(text) > 0:
                return int(text)
    return 0


def parse_artists(value: JSONValue) -> str:
    """Artist credit from a string, a ``{"name": ...}`` object or a list of either."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        return get_str(value, "name")
    if isinstance(value, list):
        names: list[str] = []
        for item in value:
            if isinstance(item, str) and item.strip():
                names.append(item.strip())
            elif isinstance(item, dict):
                name = get_str(item, "name")
                if name:
                    names.append(name)
        return ", ".join(names)
    return ""


def object_artist(obj: JSONObject) -> str:
    return parse_artists(obj.get("artists")) or parse_artists(obj.get("artist"))


def extract_track_number(obj: JSONObject) -> tuple[int, bool]:
    """Track number of a track object and whether any number field was present."""
    present = [obj[key] for key in TRACK_NUMBER_KEYS if key in obj]
    if not present:
        return 0, False
    return parse_int(*present), True


def extract_track_id(obj: JSONObject) -> int:
    return parse_int(obj.get("id"), obj.get("trackId"), obj.get("track_id"))


def extract_release_id(obj: JSONObject) -> int:
    """Release id a track object points at (0 if it does not say)."""
    if "releaseId" in obj:
        return parse_int(obj["releaseId"])
    if "release_id" in obj:
        return parse_int(obj["release_id"])
    release = obj.get("release")
    if isinstance(release, dict):
        return parse_int(release.get("id"), release.get("releaseId"), release.get("release_id"))
    return 0


def trailing_id(url: str) -> int:
    """Numeric last path segment of a URL (``.../release/name/12345``)."""
    if not url:
        return 0
    path = urlsplit(url.strip()).path.rstrip("/")
    if not path:
        return 0
    last = path.rsplit("/", 1)[-1]
    return int(last) if last.isdecimal() else 0


def track_id_from_reference(value: JSONValue) -> int:
    """Track id from an embedded object, a track URL or a bare number."""
    if isinstance(value, str):
        return trailing_id(value)
    if isinstance(value, dict):
        track_id = extract_track_id(value)
        if track_id:
            return track_id
        url = value.get("url")
        return trailing_id(url) if isinstance(url, str) else 0
    return parse_int(value)


def title_with_mix(obj: JSONObject) -> str:
    """Track title with its mix name appended when not already part of it."""
    title = get_str(obj, "name", "title")
    mix_name = get_str(obj, "mixName", "mix_name")
    if title and mix_name and mix_name.lower() not in title.lower():
        title = f"{title} ({mix_name})"
    return title


def is_track_like(obj: JSONObject) -> bool:
    """A non-empty title plus some artist field."""
    if not get_str(obj, "name", "title"):
        return False
    return "artists" in obj or "artist" in obj
