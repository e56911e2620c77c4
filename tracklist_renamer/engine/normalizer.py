"""String normalization shared by the filename parser and the matcher.

Turns raw filenames, tags and store titles into comparable token strings:
BPM annotations, dash/underscore variants, catalog-number noise and
leading track numbers are removed before similarity scoring. Normalized
strings are used for comparison only, never for display.
"""

from __future__ import annotations

import re

from tracklist_renamer.models import BPM_STYLE_COMPACT, BPM_STYLE_SPACE

# ---------------------------------------------------------------------------
# Pre-compiled patterns
# ---------------------------------------------------------------------------

# "128 bpm", "128bpm", "(128 BPM)", "[140-bpm]"; brackets are only consumed in pairs
_BPM = re.compile(
    r"(?P<open>[(\[])?\s*(?<!\d)(?P<bpm>\d{2,3})(?P<sep>[\s_-]*)bpm(?(open)\s*[)\]])",
    re.IGNORECASE,
)
_MULTI_DASH = re.compile(r"--+")
_SPACED_DASH = re.compile(r"\s+-\s+")
_MULTI_SPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_TRACK_PREFIX = re.compile(r"^\s*(\d{1,2})[.\s_-]+(.+)$")
_TRACK_ONLY = re.compile(r"^\s*(\d{1,2})\b")
_CATALOG_CODE = re.compile(r"^(?=.*[0-9])(?=.*[A-Za-z])[A-Za-z0-9]{4,}$")

_EM_DASH = "—"
_EN_DASH = "–"


# ---------------------------------------------------------------------------
# BPM annotations
# ---------------------------------------------------------------------------


def extract_bpm(raw: str) -> tuple[str, str, str]:
    """Find a BPM annotation and remove it from the string.

    Returns:
        Tuple of (bpm digits, style, string without the annotation). Style is
        ``"space"`` when a separator sits between the digits and "bpm" and
        ``"compact"`` otherwise. Without an annotation, returns
        ``("", "", raw)`` with the input unchanged.
    """
    m = _BPM.search(raw)
    if m is None:
        return "", "", raw
    style = BPM_STYLE_SPACE if m.group("sep") else BPM_STYLE_COMPACT
    cleaned = raw[: m.start()] + " " + raw[m.end() :]
    return m.group("bpm"), style, _MULTI_SPACE.sub(" ", cleaned).strip()


def format_bpm(bpm: str, style: str) -> str:
    """Render a BPM value the way it was written in the source filename."""
    if not bpm:
        return ""
    if style == BPM_STYLE_COMPACT:
        return f"({bpm}Bpm)"
    return f"({bpm} bpm)"


# ---------------------------------------------------------------------------
# Separator and noise cleanup
# ---------------------------------------------------------------------------


def normalize_template_base(raw: str) -> str:
    """Unify underscores, dash variants and whitespace.

    Underscores become spaces; em/en dashes and runs of two or more hyphens
    become a single `` - `` separator.
    """
    s = raw.replace("_", " ")
    s = s.replace(_EM_DASH, " - ").replace(_EN_DASH, " - ")
    s = _MULTI_DASH.sub(" - ", s)
    s = _SPACED_DASH.sub(" - ", s)
    return _MULTI_SPACE.sub(" ", s).strip()


def is_catalog_code(token: str) -> bool:
    """True for label catalog numbers like ``ABC123`` or ``2xl004``."""
    return _CATALOG_CODE.match(token) is not None


def strip_trailing_code_tokens(s: str) -> str:
    """Drop trailing single-character and catalog-code tokens."""
    tokens = s.split()
    while tokens and (len(tokens[-1]) == 1 or is_catalog_code(tokens[-1])):
        tokens.pop()
    return " ".join(tokens)


# ---------------------------------------------------------------------------
# Track numbers
# ---------------------------------------------------------------------------


def extract_track_prefix(s: str) -> tuple[str, str] | None:
    """Split ``"03. Title"`` style strings into ``("03", "Title")``."""
    m = _TRACK_PREFIX.match(s)
    if m is None:
        return None
    return m.group(1), m.group(2).strip()


def extract_track_number(s: str) -> str:
    """Return the leading one or two digit track number, or ""."""
    m = _TRACK_ONLY.match(s)
    return m.group(1) if m else ""


def clean_track_title(title: str, track_num: int) -> str:
    """Remove a duplicated ``"3. "`` / ``"03 - "`` prefix from a store title."""
    for prefix in (
        f"{track_num}. ",
        f"{track_num:02d}. ",
        f"{track_num} - ",
        f"{track_num:02d} - ",
    ):
        if title.startswith(prefix):
            title = title[len(prefix) :]
            break
    return title.strip()


# ---------------------------------------------------------------------------
# Comparison form
# ---------------------------------------------------------------------------


def _normalize_once(raw: str) -> str:
    _, _, base = extract_bpm(raw)
    base = normalize_template_base(base)
    prefix = extract_track_prefix(base)
    if prefix is not None:
        base = prefix[1]
    base = strip_trailing_code_tokens(base)
    base = _NON_ALNUM.sub(" ", base.lower())
    return _MULTI_SPACE.sub(" ", base).strip()


def normalize_for_match(raw: str) -> str:
    """Canonical comparison form: lowercase alphanumeric tokens.

    Cleanup steps can expose new noise (punctuation removal may leave a
    trailing single character or a catalog code), so the pipeline is
    applied until the result is stable.
    """
    if not raw:
        return ""
    current = _normalize_once(raw)
    while True:
        nxt = _normalize_once(current)
        if nxt == current:
            return current
        current = nxt


def has_token_overlap(a: str, b: str) -> bool:
    """True if two normalized strings share at least one token."""
    if not a or not b:
        return False
    return not set(a.split()).isdisjoint(b.split())
