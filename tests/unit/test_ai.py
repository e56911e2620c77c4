"""Unit tests for AI-assisted filename parsing."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from tracklist_renamer.ai import (
    DEFAULT_MODEL,
    STATUS_AI_MATCH,
    AIParsedTrack,
    build_prompt,
    generate_ai_renames,
    parse_ai_content,
    parse_filenames_with_ai,
    strip_code_fences,
)
from tracklist_renamer.exceptions import AIParseError
from tracklist_renamer.models import STATUS_NO_MATCH, LocalTrack
from tracklist_renamer.naming import FORMAT_TITLE

TRACKS_JSON = json.dumps(
    {
        "tracks": [
            {
                "original_filename": "djfoo_nightdrive_final.mp3",
                "artist": "DJ Foo",
                "title": "Night Drive",
                "track_number": "2",
            }
        ]
    }
)


def _gemini_response(text: str, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text if status != 200 else ""
    resp.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return resp


def _session(resp: Any) -> MagicMock:
    session = MagicMock()
    session.post.return_value = resp
    return session


def _local(name: str) -> LocalTrack:
    return LocalTrack(path=f"/music/{name}", original_name=name)


class TestContentParsing:
    def test_strip_json_fence(self) -> None:
        assert strip_code_fences('```json\n{"tracks": []}\n```') == '{"tracks": []}'

    def test_strip_plain_fence(self) -> None:
        assert strip_code_fences('```\n{"tracks": []}```') == '{"tracks": []}'

    def test_no_fence(self) -> None:
        assert strip_code_fences(' {"tracks": []} ') == '{"tracks": []}'

    def test_parse_tracks(self) -> None:
        [track] = parse_ai_content(TRACKS_JSON)
        assert track == AIParsedTrack(
            original_filename="djfoo_nightdrive_final.mp3",
            artist="DJ Foo",
            title="Night Drive",
            track_number="2",
        )

    def test_null_fields_become_empty(self) -> None:
        [track] = parse_ai_content('{"tracks": [{"original_filename": "a.mp3", "artist": null}]}')
        assert track.artist == ""
        assert track.track_number == ""

    def test_invalid_json(self) -> None:
        with pytest.raises(AIParseError, match="Failed to parse AI response"):
            parse_ai_content("not json")

    def test_missing_tracks_key(self) -> None:
        with pytest.raises(AIParseError):
            parse_ai_content('{"files": []}')

    def test_prompt_lists_filenames(self) -> None:
        prompt = build_prompt(["a.mp3", "b.mp3"])
        assert "a.mp3\nb.mp3" in prompt
        assert '"original_filename"' in prompt


class TestParseFilenamesWithAI:
    def test_requires_api_key(self) -> None:
        with pytest.raises(AIParseError, match="API key is required"):
            parse_filenames_with_ai(["a.mp3"], "", session=MagicMock())

    def test_request_shape(self) -> None:
        session = _session(_gemini_response(TRACKS_JSON))
        tracks = parse_filenames_with_ai(["djfoo_nightdrive_final.mp3"], "secret", session=session)

        assert len(tracks) == 1
        args, kwargs = session.post.call_args
        assert args[0].endswith(f"/models/{DEFAULT_MODEL}:generateContent")
        assert kwargs["params"] == {"key": "secret"}
        text = kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "djfoo_nightdrive_final.mp3" in text

    def test_owned_session_closed(self) -> None:
        with patch("tracklist_renamer.ai.requests.Session") as mock_session_cls:
            owned = mock_session_cls.return_value
            owned.__enter__.return_value.post.return_value = _gemini_response(TRACKS_JSON)
            tracks = parse_filenames_with_ai(["x.mp3"], "secret")

        assert tracks[0].title == "Night Drive"
        owned.__exit__.assert_called_once()

    def test_fenced_answer(self) -> None:
        session = _session(_gemini_response(f"```json\n{TRACKS_JSON}\n```"))
        tracks = parse_filenames_with_ai(["x.mp3"], "secret", model="gemini-test", session=session)
        assert tracks[0].title == "Night Drive"
        assert "gemini-test" in session.post.call_args.args[0]

    def test_http_error(self) -> None:
        session = _session(_gemini_response("quota exceeded", status=429))
        with pytest.raises(AIParseError, match="429 - quota exceeded"):
            parse_filenames_with_ai(["x.mp3"], "secret", session=session)

    def test_no_candidates(self) -> None:
        resp = _gemini_response("")
        resp.json.return_value = {"candidates": []}
        with pytest.raises(AIParseError, match="No response from AI"):
            parse_filenames_with_ai(["x.mp3"], "secret", session=_session(resp))

    def test_transport_error(self) -> None:
        session = MagicMock()
        session.post.side_effect = requests.Timeout("timed out")
        with pytest.raises(AIParseError, match="timed out"):
            parse_filenames_with_ai(["x.mp3"], "secret", session=session)


class TestGenerateAIRenames:
    def test_exact_match(self) -> None:
        parsed = parse_ai_content(TRACKS_JSON)
        [result] = generate_ai_renames([_local("djfoo_nightdrive_final.mp3")], parsed)
        assert result.proposed_name == "02. DJ Foo - Night Drive.mp3"
        assert result.status == STATUS_AI_MATCH
        assert result.confidence == 1.0

    def test_fuzzy_match(self) -> None:
        parsed = [AIParsedTrack("djfoo_nightdrive_final.mp3", "DJ Foo", "Night Drive", "2")]
        [result] = generate_ai_renames([_local("djfoo_nightdrive_final (1).mp3")], parsed, FORMAT_TITLE)
        assert result.proposed_name == "02. Night Drive.mp3"

    def test_unrelated_name_unmatched(self) -> None:
        parsed = [AIParsedTrack("something_else.mp3", "A", "B", "1")]
        [result] = generate_ai_renames([_local("djfoo_nightdrive_final.mp3")], parsed)
        assert result.status == STATUS_NO_MATCH
        assert not result.changed

    def test_empty_title_unmatched(self) -> None:
        parsed = [AIParsedTrack("a.mp3", "A", "", "1")]
        [result] = generate_ai_renames([_local("a.mp3")], parsed)
        assert result.status == STATUS_NO_MATCH
