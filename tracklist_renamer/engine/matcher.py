"""Greedy matcher for store track listings <-> local files.

Walks the store listing in order and lets every remote track claim the
best still-unclaimed local file:

  1. Score each pool entry by Sørensen-Dice similarity of normalized
     strings (filename and tags vs. title and "artist - title"), counting
     only pairs that share a token.
  2. Reward an exact leading track-number match.
  3. Accept the best candidate if it clears the store's acceptance floor.

Assignments are never revisited.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass

import textdistance

from tracklist_renamer.engine.normalizer import (
    clean_track_title,
    extract_track_number,
    has_token_overlap,
    normalize_for_match,
)
from tracklist_renamer.models import AlbumData, AlbumTrack, LocalTrack, MatchedTrack
from tracklist_renamer.naming import safe_filename

logger = logging.getLogger(__name__)

SOURCE_BEATPORT = "Beatport"

BEATPORT_MIN_CONFIDENCE = 0.25
DEFAULT_MIN_CONFIDENCE = 0.0

TRACK_NUMBER_BONUS = 0.12
# Ratings at or above this are not boosted further by a track-number match
TRACK_NUMBER_BONUS_CEILING = 0.9


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------


_DICE = textdistance.Sorensen(qval=2)


def similarity(a: str, b: str) -> float:
    """Case-insensitive Sørensen-Dice coefficient over character bigrams (0-1).

    Bigrams are counted as a multiset. Strings shorter than one bigram
    only match themselves.
    """
    a, b = a.lower(), b.lower()
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    return float(_DICE(a, b))


def _overlap_score(a: str, b: str) -> float:
    """Similarity of two normalized strings, or 0 if they share no token."""
    if not a or not b or not has_token_overlap(a, b):
        return 0.0
    return similarity(a, b)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def min_confidence_for(source: str) -> float:
    """Acceptance floor for a store."""
    if source.lower() == SOURCE_BEATPORT.lower():
        return BEATPORT_MIN_CONFIDENCE
    return DEFAULT_MIN_CONFIDENCE


def _stem(name: str) -> str:
    return os.path.splitext(name)[0]


def _local_track_number(local: LocalTrack) -> int | None:
    num = extract_track_number(_stem(local.original_name))
    return int(num) if num else None


@dataclass(frozen=True, slots=True)
class _RemoteKeys:
    """Normalized comparison strings for one album track."""

    title: str
    full: str


def _remote_keys(album: AlbumData, track: AlbumTrack) -> _RemoteKeys:
    title = normalize_for_match(track.title)
    full = ""
    if track.artist.strip():
        full = normalize_for_match(f"{track.artist} - {track.title}")
    elif album.artist:
        full = normalize_for_match(f"{album.artist} - {track.title}")
    return _RemoteKeys(title=title, full=full)


def rate_local_track(keys: _RemoteKeys, local: LocalTrack) -> float:
    """Best of the filename and tag similarity scores for one local file."""
    local_norm = normalize_for_match(_stem(local.original_name))
    rating = max(_overlap_score(keys.title, local_norm), _overlap_score(keys.full, local_norm))

    if local.tag_title:
        tag_title = normalize_for_match(local.tag_title)
        rating = max(rating, _overlap_score(keys.title, tag_title))
        if local.tag_artist and keys.full:
            tag_full = normalize_for_match(f"{local.tag_artist} - {local.tag_title}")
            rating = max(rating, _overlap_score(keys.full, tag_full))
    return rating


def apply_track_number_bonus(rating: float, remote: AlbumTrack, local: LocalTrack) -> float:
    """Boost a rating when the local leading number confirms the remote one."""
    if not remote.track_num_explicit or remote.track_num <= 0:
        return rating
    if _local_track_number(local) != remote.track_num:
        return rating
    if rating >= TRACK_NUMBER_BONUS_CEILING:
        return rating
    return min(rating + TRACK_NUMBER_BONUS, 1.0)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def _album_artist_fallback(album: AlbumData) -> str:
    artist = album.artist.strip()
    if not artist:
        head, sep, _ = album.title.partition(" - ")
        if sep:
            artist = head.strip()
    return artist


def choose_track_number(album: AlbumData, remote: AlbumTrack, local: LocalTrack) -> int:
    """Track number for the new name.

    The local leading number wins when the store only inferred its number
    from list position, and on Beatport when the explicit numbers disagree.
    """
    local_num = _local_track_number(local)
    if local_num is None:
        return remote.track_num
    if not remote.track_num_explicit:
        return local_num
    if album.source.lower() == SOURCE_BEATPORT.lower() and remote.track_num != local_num:
        return local_num
    return remote.track_num


def propose_name(album: AlbumData, remote: AlbumTrack, local: LocalTrack) -> str:
    """Build ``"NN. Artist - Title.ext"`` for an accepted match."""
    ext = os.path.splitext(local.original_name)[1]
    track_num = choose_track_number(album, remote, local)

    title = remote.title
    if remote.track_num_explicit and remote.track_num > 0:
        title = clean_track_title(title, remote.track_num)

    if "-" in title:
        # Already "Artist - Title"
        name = title
    elif remote.artist.strip():
        name = f"{remote.artist.strip()} - {title}"
    elif fallback := _album_artist_fallback(album):
        name = f"{fallback} - {title}"
    else:
        name = title
    return f"{track_num:02d}. {safe_filename(name)}{ext}"


# ---------------------------------------------------------------------------
# Greedy assignment
# ---------------------------------------------------------------------------


def match_album(
    album: AlbumData,
    local_tracks: Sequence[LocalTrack],
    *,
    min_confidence: float | None = None,
) -> list[MatchedTrack]:
    """Assign store tracks to local files, one pass in listing order.

    Args:
        album: Scraped release; track order is significant.
        local_tracks: Candidate files; earlier entries win exact ties.
        min_confidence: Acceptance floor override. Defaults to the
            store-specific floor.

    Returns:
        One entry per accepted match. Unmatched store tracks and local
        files produce no entry.
    """
    floor = min_confidence_for(album.source) if min_confidence is None else min_confidence
    pool = list(local_tracks)
    claimed = [False] * len(pool)
    remaining = len(pool)
    results: list[MatchedTrack] = []

    logger.debug("Matching %d store tracks against %d files", len(album.tracks), remaining)

    for remote in album.tracks:
        if remaining == 0:
            break
        keys = _remote_keys(album, remote)

        best_index = -1
        best_rating = -1.0
        for i, local in enumerate(pool):
            if claimed[i]:
                continue
            rating = apply_track_number_bonus(rate_local_track(keys, local), remote, local)
            logger.debug("  %r vs %r: %.3f", remote.title, local.original_name, rating)
            if rating > best_rating:
                best_rating = rating
                best_index = i

        if best_index < 0 or best_rating < floor:
            logger.debug("No match for %r (best %.3f < %.2f)", remote.title, best_rating, floor)
            continue

        local = pool[best_index]
        claimed[best_index] = True
        remaining -= 1
        results.append(
            MatchedTrack(
                local_path=local.path,
                original_name=local.original_name,
                proposed_name=propose_name(album, remote, local),
                confidence=max(0.0, min(best_rating, 1.0)),
                status=f"{album.source} Match",
            )
        )
    return results
