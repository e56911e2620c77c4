"""Beatport release page extraction.

Beatport has no single authoritative data container, so the track
listing is discovered in whichever embedded JSON document has it.
Strategies, first non-empty result wins:

  1. JSON-LD blocks describing a MusicAlbum / MusicRelease / MusicPlaylist
  2. The Next.js ``__NEXT_DATA__`` payload:
     a. the dehydrated "tracks" query for this release
     b. generic mining of every track-like array in the tree
  3. Per-track ``span[data-json]`` blobs

An order map (track id -> 1-based position) recovered from the release
node in ``__NEXT_DATA__`` corrects or fills track numbers along the way.
The og:title meta tag only fills album title/artist left empty.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from bs4 import BeautifulSoup

from tracklist_renamer.exceptions import AlbumDataNotFoundError
from tracklist_renamer.models import AlbumData, AlbumTrack
from tracklist_renamer.stores._json import (
    JSONObject,
    JSONValue,
    extract_release_id,
    extract_track_id,
    extract_track_number,
    get_str,
    is_track_like,
    object_artist,
    parse_artists,
    parse_int,
    title_with_mix,
    track_id_from_reference,
    trailing_id,
)

logger = logging.getLogger(__name__)

SOURCE = "Beatport"

OrderMap = dict[int, int]

_LD_ALBUM_TYPES = frozenset({"MusicAlbum", "MusicRelease", "MusicPlaylist"})
_META_SITE_SUFFIX = " on Beatport"

# Candidate-array scoring weights
_SCORE_PER_NUMBER = 3
_SCORE_FULL_SEQUENCE = 200
_SCORE_PARTIAL_SEQUENCE = 100
_SCORE_RELEASE_MATCH = 1000
_SCORE_PER_RELEASE_HIT = 10
_SCORE_PER_ORDER_HIT = 5
_SCORE_ORDER_MAJORITY = 50


# ---------------------------------------------------------------------------
# Page-level helpers
# ---------------------------------------------------------------------------


def release_id_from_url(url: str) -> int:
    """Release id from ``https://www.beatport.com/release/<slug>/<id>``."""
    return trailing_id(url)


def parse_meta_title(s: str) -> tuple[str, str]:
    """Split an og:title like ``"Night Drive by DJ Foo on Beatport"``.

    Returns:
        Tuple of (title, artist); artist is "" when there is no " by ".
    """
    s = s.replace(_META_SITE_SUFFIX, "").strip()
    title, sep, artist = s.partition(" by ")
    if sep:
        return title.strip(), artist.strip()
    return s, ""


def _album_track(obj: JSONObject, position: int, order_map: OrderMap | None) -> AlbumTrack | None:
    """Build an AlbumTrack from a track object; None if it has no title.

    Track number precedence: explicit field, order map, list position.
    """
    title = title_with_mix(obj)
    if not title:
        return None
    track_id = extract_track_id(obj)
    track_num, explicit = extract_track_number(obj)
    if track_num == 0 and order_map and track_id in order_map:
        track_num = order_map[track_id]
        explicit = True
    if track_num == 0:
        track_num = position
    return AlbumTrack(
        title=title,
        artist=object_artist(obj),
        track_num=track_num,
        track_num_explicit=explicit,
        track_id=track_id,
    )


def build_tracks(objs: Iterable[Any], order_map: OrderMap | None = None) -> list[AlbumTrack]:
    """AlbumTracks for a list of track objects, non-objects skipped."""
    tracks: list[AlbumTrack] = []
    dicts = [obj for obj in objs if isinstance(obj, dict)]
    for position, obj in enumerate(dicts, start=1):
        track = _album_track(obj, position, order_map)
        if track is not None:
            tracks.append(track)
    return tracks


# ---------------------------------------------------------------------------
# Strategy 1: JSON-LD
# ---------------------------------------------------------------------------


def _ld_tracks(value: JSONValue) -> list[AlbumTrack]:
    if not isinstance(value, list):
        return []
    tracks: list[AlbumTrack] = []
    for position, item in enumerate(value, start=1):
        if not isinstance(item, dict):
            continue
        title = get_str(item, "name", "title")
        if not title:
            continue
        track_num, explicit = extract_track_number(item)
        tracks.append(
            AlbumTrack(
                title=title,
                artist=parse_artists(item.get("byArtist")) or parse_artists(item.get("artist")),
                track_num=track_num or position,
                track_num_explicit=explicit,
            )
        )
    return tracks


def parse_ld_data(data: JSONValue) -> tuple[list[AlbumTrack], str, str]:
    """Search a JSON-LD document for the richest album node.

    Returns:
        Tuple of (tracks, album title, album artist).
    """
    if isinstance(data, list):
        best: tuple[list[AlbumTrack], str, str] = ([], "", "")
        for item in data:
            found = parse_ld_data(item)
            if len(found[0]) > len(best[0]):
                best = found
        return best
    if isinstance(data, dict):
        if "@graph" in data:
            return parse_ld_data(data["@graph"])
        if get_str(data, "@type") in _LD_ALBUM_TYPES:
            title = get_str(data, "name", "title")
            artist = parse_artists(data.get("byArtist")) or parse_artists(data.get("artist"))
            return _ld_tracks(data.get("track")), title, artist
    return [], "", ""


def parse_json_ld(soup: BeautifulSoup) -> tuple[list[AlbumTrack], str, str]:
    """Richest album across all ``application/ld+json`` blocks."""
    best: tuple[list[AlbumTrack], str, str] = ([], "", "")
    for script in soup.select("script[type='application/ld+json']"):
        raw = (script.string or "").strip()
        if not raw:
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Skipping undecodable JSON-LD block")
            continue
        found = parse_ld_data(data)
        if len(found[0]) > len(best[0]):
            best = found
    return best


# ---------------------------------------------------------------------------
# Order map
# ---------------------------------------------------------------------------


def build_order_map(track_refs: JSONValue) -> OrderMap:
    """Map track ids to 1-based positions from an ordered reference list."""
    if not isinstance(track_refs, list):
        return {}
    order: OrderMap = {}
    for ref in track_refs:
        track_id = track_id_from_reference(ref)
        if track_id and track_id not in order:
            order[track_id] = len(order) + 1
    return order


def find_release_track_order(value: JSONValue, release_id: int) -> OrderMap:
    """Order map from the first node with ``id == release_id`` listing its tracks."""
    if isinstance(value, dict):
        if release_id and parse_int(value.get("id")) == release_id and "tracks" in value:
            order = build_order_map(value["tracks"])
            if order:
                return order
        nested: Iterable[JSONValue] = value.values()
    elif isinstance(value, list):
        nested = value
    else:
        return {}
    for item in nested:
        order = find_release_track_order(item, release_id)
        if order:
            return order
    return {}


# ---------------------------------------------------------------------------
# Strategy 2a: dehydrated "tracks" query
# ---------------------------------------------------------------------------


def _dig(value: JSONValue, *path: str) -> JSONValue:
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def tracks_from_dehydrated(
    data: JSONValue,
    release_id: int,
    order_map: OrderMap | None,
) -> list[AlbumTrack]:
    """Tracks from the cached ``["tracks", {release_id: ...}]`` query."""
    queries = _dig(data, "props", "pageProps", "dehydratedState", "queries")
    if not isinstance(queries, list):
        return []
    for query in queries:
        if not isinstance(query, dict):
            continue
        key = query.get("queryKey")
        if not isinstance(key, list) or len(key) < 2 or key[0] != "tracks":
            continue
        params = key[1]
        if not isinstance(params, dict):
            continue
        if release_id and parse_int(params.get("release_id"), params.get("releaseId")) != release_id:
            continue
        results = _dig(query, "state", "data", "results")
        if not isinstance(results, list) or not results:
            continue
        return build_tracks(results, order_map)
    return []


# ---------------------------------------------------------------------------
# Strategy 2b: generic tree mining
# ---------------------------------------------------------------------------


def collect_track_arrays(value: JSONValue, out: list[list[JSONObject]] | None = None) -> list[list[JSONObject]]:
    """Every non-empty array in the tree whose elements are all track-like."""
    if out is None:
        out = []
    if isinstance(value, dict):
        for nested in value.values():
            collect_track_arrays(nested, out)
    elif isinstance(value, list):
        if value and all(isinstance(item, dict) and is_track_like(item) for item in value):
            out.append(list(value))
        for nested in value:
            collect_track_arrays(nested, out)
    return out


def is_sequential_from_one(nums: Sequence[int], expected: int) -> bool:
    """True if *nums* are distinct positives covering 1..expected."""
    if not nums or any(n <= 0 for n in nums):
        return False
    seen = set(nums)
    if len(seen) != len(nums):
        return False
    if expected <= 0:
        expected = len(nums)
    return all(i in seen for i in range(1, expected + 1))


def score_track_candidate(
    arr: Sequence[JSONObject],
    release_id: int,
    order_map: OrderMap | None,
) -> int:
    """How likely an array of track-like objects is the release's listing."""
    n = len(arr)
    nums: list[int] = []
    artist_count = 0
    release_seen = 0
    release_match = 0
    order_hits = 0
    for obj in arr:
        num, _ = extract_track_number(obj)
        if num > 0:
            nums.append(num)
        if "artists" in obj or "artist" in obj:
            artist_count += 1
        if release_id:
            obj_release = extract_release_id(obj)
            if obj_release:
                release_seen += 1
                if obj_release == release_id:
                    release_match += 1
        if order_map:
            track_id = extract_track_id(obj)
            if track_id and track_id in order_map:
                order_hits += 1

    score = n + artist_count
    if nums:
        score += len(nums) * _SCORE_PER_NUMBER
        if is_sequential_from_one(nums, n):
            score += _SCORE_FULL_SEQUENCE
        elif is_sequential_from_one(nums, len(nums)):
            score += _SCORE_PARTIAL_SEQUENCE
    if release_id and release_seen:
        if release_match == release_seen and release_match >= n // 2:
            score += _SCORE_RELEASE_MATCH
        elif release_match:
            score += release_match * _SCORE_PER_RELEASE_HIT
    if order_hits:
        score += order_hits * _SCORE_PER_ORDER_HIT
        if order_hits >= n // 2:
            score += _SCORE_ORDER_MAJORITY
    return score


def order_track_objects(arr: list[JSONObject], order_map: OrderMap | None) -> list[JSONObject]:
    """Reorder discovered track objects, or keep discovery order.

    The order map is used when it places at least half of the objects
    (the rest follow in discovery order). Otherwise explicit track numbers
    are used if they form a complete 1..N permutation.
    """
    if not arr:
        return arr

    if order_map:
        positions: dict[int, int] = {}
        for idx, obj in enumerate(arr):
            pos = order_map.get(extract_track_id(obj), 0)
            if pos and pos not in positions:
                positions[pos] = idx
        placed = [positions[pos] for pos in sorted(positions)]
        if 2 * len(placed) >= len(arr):
            used = set(placed)
            return [arr[i] for i in placed] + [obj for i, obj in enumerate(arr) if i not in used]

    nums = [extract_track_number(obj)[0] for obj in arr]
    if all(n > 0 for n in nums) and is_sequential_from_one(nums, len(arr)):
        return [obj for _, obj in sorted(zip(nums, arr), key=lambda pair: pair[0])]
    return arr


def find_track_list(data: JSONValue, release_id: int, order_map: OrderMap | None) -> list[AlbumTrack]:
    """Best-scoring track-like array anywhere in the tree."""
    candidates = collect_track_arrays(data)
    if not candidates:
        return []
    best = candidates[0]
    best_score = score_track_candidate(best, release_id, order_map)
    for cand in candidates[1:]:
        score = score_track_candidate(cand, release_id, order_map)
        if score > best_score:
            best, best_score = cand, score
    logger.debug("Mined %d candidate arrays, best has %d tracks (score %d)", len(candidates), len(best), best_score)
    return build_tracks(order_track_objects(best, order_map), order_map)


def parse_next_data(soup: BeautifulSoup, release_id: int) -> tuple[list[AlbumTrack], OrderMap]:
    """Tracks and order map from the ``__NEXT_DATA__`` hydration payload."""
    script = soup.select_one("script#__NEXT_DATA__")
    raw = (script.string or "").strip() if script is not None else ""
    if not raw:
        return [], {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Skipping undecodable __NEXT_DATA__ payload")
        return [], {}

    order_map = find_release_track_order(data, release_id)
    tracks = tracks_from_dehydrated(data, release_id, order_map)
    if tracks:
        return tracks, order_map
    return find_track_list(data, release_id, order_map), order_map


# ---------------------------------------------------------------------------
# Strategy 3: per-track data-json blobs
# ---------------------------------------------------------------------------


def parse_data_json_spans(
    soup: BeautifulSoup,
    release_id: int,
    order_map: OrderMap | None,
) -> list[AlbumTrack]:
    """Tracks from ``span[data-json]`` blobs that belong to this release."""
    objs: list[JSONObject] = []
    for span in soup.select("span[data-json]"):
        raw = str(span.get("data-json") or "").strip()
        if not raw:
            continue
        try:
            obj = json.loads(raw)
        except json.JSONDecodeError:
            continue
        if not isinstance(obj, dict):
            continue
        if release_id:
            obj_release = extract_release_id(obj)
            if obj_release and obj_release != release_id:
                continue
        objs.append(obj)

    tracks: list[AlbumTrack] = []
    for obj in objs:
        track = _album_track(obj, len(tracks) + 1, order_map)
        if track is not None:
            tracks.append(track)
    return tracks


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------


def parse_release_page(html: str, url: str = "") -> AlbumData:
    """Build AlbumData from a Beatport release page.

    Raises:
        AlbumDataNotFoundError: If no strategy finds any track.
    """
    soup = BeautifulSoup(html, "html.parser")
    release_id = release_id_from_url(url)
    album = AlbumData(source=SOURCE)

    tracks, ld_title, ld_artist = parse_json_ld(soup)
    if tracks:
        logger.debug("Using JSON-LD track list (%d tracks)", len(tracks))
        album.title, album.artist = ld_title, ld_artist
    else:
        tracks, order_map = parse_next_data(soup, release_id)
        if tracks:
            logger.debug("Using __NEXT_DATA__ track list (%d tracks)", len(tracks))
        else:
            tracks = parse_data_json_spans(soup, release_id, order_map)
            logger.debug("Using data-json track list (%d tracks)", len(tracks))

    if not tracks:
        raise AlbumDataNotFoundError(url, "Could not find Beatport track data on page", html[:500])
    album.tracks = tracks

    meta = soup.select_one("meta[property='og:title']")
    og_title = str(meta.get("content") or "").strip() if meta is not None else ""
    if og_title:
        title, artist = parse_meta_title(og_title)
        album.title = album.title or title
        album.artist = album.artist or artist
    return album
