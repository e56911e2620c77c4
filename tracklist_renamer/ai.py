"""AI-assisted filename parsing through the Gemini API.

Used when neither a store listing nor the template parser gives good
names: the whole folder listing is sent in one prompt and the model
returns structured artist/title/track number guesses.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import requests
from rapidfuzz import fuzz, process

from tracklist_renamer.exceptions import AIParseError
from tracklist_renamer.models import LocalTrack, MatchedTrack
from tracklist_renamer.naming import DEFAULT_FORMAT, build_filename

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-lite"
STATUS_AI_MATCH = "AI Match"

_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
_REQUEST_TIMEOUT = 60
_MIN_FUZZY_SCORE = 90

_PROMPT = """
I have a list of audio filenames that are messy. Please extract the Artist, Title, and Track Number (if present) for each.
Return the result as a JSON object with a key "tracks" containing a list of objects.
Each object should have: "original_filename", "artist", "title", "track_number".
If a field is missing, use an empty string.
Do not include any markdown formatting (like ```json) in the response, just the raw JSON string.

Filenames:
{filenames}
"""


@dataclass(frozen=True, slots=True)
class AIParsedTrack:
    """One filename as structured by the model."""

    original_filename: str
    artist: str = ""
    title: str = ""
    track_number: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AIParsedTrack:
        def text(key: str) -> str:
            value = data.get(key)
            if value is None:
                return ""
            return str(value).strip()

        return cls(
            original_filename=text("original_filename"),
            artist=text("artist"),
            title=text("title"),
            track_number=text("track_number"),
        )


def build_prompt(filenames: Sequence[str]) -> str:
    return _PROMPT.format(filenames="\n".join(filenames))


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code block, if any."""
    content = content.strip()
    for prefix in ("```json", "```"):
        if content.startswith(prefix):
            content = content[len(prefix) :]
            break
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def _response_text(payload: Any) -> str:
    try:
        return str(payload["candidates"][0]["content"]["parts"][0]["text"])
    except (KeyError, IndexError, TypeError) as e:
        raise AIParseError("No response from AI") from e


def parse_ai_content(content: str) -> list[AIParsedTrack]:
    """Decode the model's ``{"tracks": [...]}`` answer.

    Raises:
        AIParseError: If the content is not the expected JSON document.
    """
    content = strip_code_fences(content)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AIParseError(f"Failed to parse AI response: {e}. Content: {content[:500]}") from e
    if not isinstance(data, dict) or not isinstance(data.get("tracks"), list):
        raise AIParseError(f"AI response has no track list. Content: {content[:500]}")
    return [AIParsedTrack.from_dict(item) for item in data["tracks"] if isinstance(item, dict)]


def parse_filenames_with_ai(
    filenames: Sequence[str],
    api_key: str,
    *,
    model: str = DEFAULT_MODEL,
    session: requests.Session | None = None,
) -> list[AIParsedTrack]:
    """Ask Gemini to split each filename into artist, title and track number.

    Args:
        filenames: Filenames to parse, sent in a single request.
        api_key: Gemini API key.
        model: Gemini model name.
        session: Optional requests session (mainly for tests).

    Raises:
        AIParseError: If the key is missing, the request fails or the
            answer cannot be decoded.
    """
    if not api_key:
        raise AIParseError("API key is required")

    if session is None:
        with requests.Session() as owned:
            return parse_filenames_with_ai(filenames, api_key, model=model, session=owned)

    body = {"contents": [{"parts": [{"text": build_prompt(filenames)}]}]}
    logger.debug("Sending %d filenames to %s", len(filenames), model)
    try:
        resp = session.post(
            _API_URL.format(model=model),
            params={"key": api_key},
            json=body,
            timeout=_REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise AIParseError(f"AI request failed: {e}") from e

    if resp.status_code != 200:
        raise AIParseError(f"AI API error: {resp.status_code} - {resp.text}")

    try:
        payload = resp.json()
    except ValueError as e:
        raise AIParseError(f"AI API returned invalid JSON: {e}") from e

    tracks = parse_ai_content(_response_text(payload))
    logger.info("AI parsed %d of %d filenames", len(tracks), len(filenames))
    return tracks


def _find_parsed(name: str, parsed: Sequence[AIParsedTrack]) -> AIParsedTrack | None:
    """Result for a local filename: exact name first, then close fuzzy match."""
    for item in parsed:
        if item.original_filename == name:
            return item
    choices = [item.original_filename for item in parsed]
    best = process.extractOne(name, choices, scorer=fuzz.ratio, score_cutoff=_MIN_FUZZY_SCORE)
    if best is None:
        return None
    return parsed[best[2]]


def generate_ai_renames(
    local_tracks: Sequence[LocalTrack],
    parsed: Sequence[AIParsedTrack],
    fmt: str = DEFAULT_FORMAT,
) -> list[MatchedTrack]:
    """Propose a new name for every local file from the AI results."""
    results: list[MatchedTrack] = []
    for track in local_tracks:
        item = _find_parsed(track.original_name, parsed)
        if item is None or not item.title:
            logger.debug("No AI result for %s", track.original_name)
            results.append(MatchedTrack.unmatched(track))
            continue
        _, ext = os.path.splitext(track.original_name)
        results.append(
            MatchedTrack(
                local_path=track.path,
                original_name=track.original_name,
                proposed_name=build_filename(
                    fmt,
                    track=item.track_number,
                    artist=item.artist,
                    title=item.title,
                    ext=ext,
                ),
                confidence=1.0,
                status=STATUS_AI_MATCH,
            )
        )
    return results
