"""Filename template parser.

Guesses (artist, title, track number, BPM) from a single loose filename
when no store listing is available. Several independent strategies each
produce an optional candidate with a fixed confidence; the best usable
one wins. Embedded tags override the filename when they agree with it.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import replace

from tracklist_renamer.engine.normalizer import (
    extract_bpm,
    extract_track_prefix,
    format_bpm,
    has_token_overlap,
    is_catalog_code,
    normalize_for_match,
    normalize_template_base,
    strip_trailing_code_tokens,
)
from tracklist_renamer.models import (
    BPM_STYLE_COMPACT,
    STATUS_MATCHED,
    LocalTrack,
    MatchedTrack,
    TemplateCandidate,
)
from tracklist_renamer.naming import DEFAULT_FORMAT, build_filename

logger = logging.getLogger(__name__)

# Strategy confidences
CONF_LEGACY = 0.9
CONF_LABEL_PREFIX = 0.95
CONF_NUMBERED_PARTS = 0.8
CONF_NUMBERED_ARTIST = 0.7
CONF_TWO_PARTS = 0.6
CONF_MANY_PARTS = 0.55
CONF_VS = 0.55
CONF_AMPERSAND = 0.5
CONF_FIRST_TOKEN = 0.4
CONF_TAGS = 0.85

_LEGACY_TEMPLATE = re.compile(
    r"^(?P<artist>.+?)\s+-\s+(?P<album>.+?)\s+-\s+(?P<track>\d+)\s+(?P<title>.+?)"
    r"(?:\s+\((?P<bpm>\d+)\))?$",
    re.IGNORECASE,
)
_DIGITS_ONLY = re.compile(r"^\d{1,3}$")
_LABEL_KEYWORDS = re.compile(
    r"\b(records?|recordings|music|label|netlabel|rec|recs)\b",
    re.IGNORECASE,
)
_VS_TOKENS = frozenset({"vs", "vs."})


# ---------------------------------------------------------------------------
# Splitting
# ---------------------------------------------------------------------------


def _clean_parts(raw_parts: Iterable[str]) -> list[str]:
    parts = [p.strip() for p in raw_parts if p.strip()]
    if len(parts) > 1 and is_catalog_code(parts[-1]):
        parts.pop()
    return parts


def split_template_parts(s: str) -> list[str]:
    """Split on `` - `` separators, dropping empties and a trailing catalog code."""
    return _clean_parts(s.split(" - "))


def split_template_parts_loose(s: str) -> list[str]:
    """Split on bare hyphens, but only when there are at least two of them.

    A single hyphen is too often part of a name ("Jay-Z", "Lo-Fi") to be
    treated as a separator.
    """
    if " - " in s:
        return split_template_parts(s)
    if s.count("-") < 2:
        return [s.strip()]
    return _clean_parts(s.split("-"))


def is_label_part(s: str) -> bool:
    return _LABEL_KEYWORDS.search(s) is not None


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def parse_legacy_template(base: str) -> TemplateCandidate | None:
    """Rigid ``Artist - Album - NN Title (BPM)`` shape."""
    m = _LEGACY_TEMPLATE.match(base)
    if m is None:
        return None
    bpm = (m.group("bpm") or "").strip()
    return TemplateCandidate(
        artist=m.group("artist"),
        title=m.group("title"),
        track=m.group("track"),
        bpm=bpm,
        bpm_style=BPM_STYLE_COMPACT if bpm else "",
        confidence=CONF_LEGACY,
    )


def parse_template_from_parts(parts: list[str]) -> TemplateCandidate | None:
    """Interpret `` - `` delimited parts; the first rule that fires wins."""
    if not parts:
        return None

    if len(parts) >= 3 and _DIGITS_ONLY.match(parts[0]):
        return TemplateCandidate(
            artist=parts[1],
            title=" - ".join(parts[2:]),
            track=parts[0],
            confidence=CONF_NUMBERED_PARTS,
        )

    last_prefix = extract_track_prefix(parts[-1])
    if last_prefix is not None:
        track, rest = last_prefix
        return TemplateCandidate(
            artist=parts[0],
            title=rest,
            track=track,
            confidence=CONF_NUMBERED_PARTS,
        )

    first_prefix = extract_track_prefix(parts[0])
    if first_prefix is not None and first_prefix[1]:
        track, rest = first_prefix
        title = parts[1] if len(parts) == 2 else parts[-1]
        return TemplateCandidate(
            artist=rest,
            title=title,
            track=track,
            confidence=CONF_NUMBERED_ARTIST,
        )

    if len(parts) >= 3:
        if is_label_part(parts[0]):
            return TemplateCandidate(
                artist=parts[1],
                title=" - ".join(parts[2:]),
                confidence=CONF_LABEL_PREFIX,
            )
        return TemplateCandidate(
            artist=parts[0],
            title=" - ".join(parts[1:]),
            confidence=CONF_MANY_PARTS,
        )

    if len(parts) == 2:
        return TemplateCandidate(artist=parts[0], title=parts[1], confidence=CONF_TWO_PARTS)

    return None


def _split_at(tokens: list[str], i: int, track: str, confidence: float) -> TemplateCandidate:
    artist_tokens = ["Vs." if t.lower() in _VS_TOKENS else t for t in tokens[: i + 2]]
    return TemplateCandidate(
        artist=" ".join(artist_tokens),
        title=" ".join(tokens[i + 2 :]),
        track=track,
        confidence=confidence,
    )


def parse_template_from_tokens(s: str) -> TemplateCandidate | None:
    """Whitespace-token fallback for names without dash structure."""
    track = ""
    base = s
    prefix = extract_track_prefix(s)
    if prefix is not None:
        track, base = prefix
    base = strip_trailing_code_tokens(base.strip())
    tokens = base.split()
    if len(tokens) >= 2 and tokens[0].lower() == tokens[1].lower():
        tokens = tokens[1:]
    if not tokens:
        return None

    # "A vs. B Title": the artist runs through the token after "vs"
    for i, t in enumerate(tokens):
        if t.lower() in _VS_TOKENS and i >= 1 and i + 2 < len(tokens):
            return _split_at(tokens, i, track, CONF_VS)

    for i in range(len(tokens) - 1, 0, -1):
        if tokens[i] == "&" and i + 2 < len(tokens):
            return _split_at(tokens, i, track, CONF_AMPERSAND)

    if len(tokens) >= 2:
        return TemplateCandidate(
            artist=tokens[0],
            title=" ".join(tokens[1:]),
            track=track,
            confidence=CONF_FIRST_TOKEN,
        )
    return None


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def choose_best_candidate(candidates: Iterable[TemplateCandidate | None]) -> TemplateCandidate:
    """Pick the strictly highest-confidence usable candidate.

    Exact ties keep the earlier candidate. Returns the zero value when no
    candidate has both an artist and a title.
    """
    best: TemplateCandidate | None = None
    for cand in candidates:
        if cand is None or not cand.usable:
            continue
        if best is None or cand.confidence > best.confidence:
            best = cand
    return best if best is not None else TemplateCandidate()


def _with_bpm(cand: TemplateCandidate, bpm: str, style: str) -> TemplateCandidate:
    if not cand.usable or not bpm:
        return cand
    return replace(cand, bpm=bpm, bpm_style=style)


def build_template_candidate(track: LocalTrack) -> TemplateCandidate:
    """Best-guess structure for one local file.

    Returns the zero value when the name is ambiguous or unparseable.
    """
    base, _ext = os.path.splitext(track.original_name)
    bpm, bpm_style, base_no_bpm = extract_bpm(base)
    normalized = strip_trailing_code_tokens(normalize_template_base(base_no_bpm))

    parts = split_template_parts(normalized)
    if len(parts) <= 1:
        parts = split_template_parts_loose(normalized)

    # A bare number at the end without a "bpm" marker could be anything
    if not bpm and len(parts) >= 3 and _DIGITS_ONLY.match(parts[-1]):
        logger.debug("Ambiguous numeric tail, leaving as is: %s", track.original_name)
        return TemplateCandidate()

    candidates = [
        parse_legacy_template(base_no_bpm),
        parse_template_from_parts(parts),
        parse_template_from_tokens(normalized),
    ]
    file_cand = _with_bpm(choose_best_candidate(candidates), bpm, bpm_style)

    tag_artist = track.tag_artist.strip()
    tag_title = track.tag_title.strip()
    if tag_artist and tag_title:
        tag_norm = normalize_for_match(f"{tag_artist} - {tag_title}")
        if has_token_overlap(tag_norm, normalize_for_match(base_no_bpm)):
            return TemplateCandidate(
                artist=tag_artist,
                title=tag_title,
                bpm=bpm,
                bpm_style=bpm_style if bpm else "",
                confidence=CONF_TAGS,
            )

    return file_cand


# ---------------------------------------------------------------------------
# Rename proposals
# ---------------------------------------------------------------------------


def append_bpm_if_missing(title: str, bpm: str, style: str) -> str:
    if not bpm or "bpm" in title.lower():
        return title
    return f"{title.strip()} {format_bpm(bpm, style)}"


def generate_template_renames(
    tracks: Iterable[LocalTrack],
    fmt: str = DEFAULT_FORMAT,
) -> list[MatchedTrack]:
    """Propose a new name for every file from its own filename and tags."""
    results: list[MatchedTrack] = []
    for track in tracks:
        cand = build_template_candidate(track)
        if not cand.usable:
            results.append(MatchedTrack.unmatched(track))
            continue
        _, ext = os.path.splitext(track.original_name)
        proposed = build_filename(
            fmt,
            track=cand.track,
            artist=cand.artist,
            title=append_bpm_if_missing(cand.title, cand.bpm, cand.bpm_style),
            bpm=cand.bpm,
            ext=ext,
        )
        logger.debug("%s -> %s (%.2f)", track.original_name, proposed, cand.confidence)
        results.append(
            MatchedTrack(
                local_path=track.path,
                original_name=track.original_name,
                proposed_name=proposed,
                confidence=cand.confidence,
                status=STATUS_MATCHED,
            )
        )
    return results
