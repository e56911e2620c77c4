"""Unit tests for string normalization."""

from __future__ import annotations

import pytest

from tracklist_renamer.engine.normalizer import (
    clean_track_title,
    extract_bpm,
    extract_track_number,
    extract_track_prefix,
    format_bpm,
    has_token_overlap,
    is_catalog_code,
    normalize_for_match,
    normalize_template_base,
    strip_trailing_code_tokens,
)
from tracklist_renamer.models import BPM_STYLE_COMPACT, BPM_STYLE_SPACE


class TestExtractBpm:
    def test_spaced_in_parentheses(self) -> None:
        bpm, style, cleaned = extract_bpm("Night Drive (128 bpm)")
        assert bpm == "128"
        assert style == BPM_STYLE_SPACE
        assert cleaned == "Night Drive"

    def test_compact_uppercase(self) -> None:
        bpm, style, cleaned = extract_bpm("Night Drive 140BPM")
        assert bpm == "140"
        assert style == BPM_STYLE_COMPACT
        assert cleaned == "Night Drive"

    def test_square_brackets_and_hyphen(self) -> None:
        bpm, style, cleaned = extract_bpm("Track [95-bpm] Edit")
        assert bpm == "95"
        assert style == BPM_STYLE_SPACE
        assert cleaned == "Track Edit"

    def test_unpaired_bracket_is_kept(self) -> None:
        bpm, _, cleaned = extract_bpm("Track (Remix 128bpm")
        assert bpm == "128"
        assert cleaned == "Track (Remix"

    def test_no_annotation_returns_input(self) -> None:
        assert extract_bpm("Track 128") == ("", "", "Track 128")

    def test_longer_numbers_are_not_bpm(self) -> None:
        bpm, _, _ = extract_bpm("Track 12345bpm")
        assert bpm == ""


class TestFormatBpm:
    def test_styles(self) -> None:
        assert format_bpm("128", BPM_STYLE_SPACE) == "(128 bpm)"
        assert format_bpm("128", BPM_STYLE_COMPACT) == "(128Bpm)"

    def test_empty(self) -> None:
        assert format_bpm("", BPM_STYLE_SPACE) == ""


class TestNormalizeTemplateBase:
    def test_underscores_and_dashes(self) -> None:
        assert normalize_template_base("DJ_Foo -- Night_Drive") == "DJ Foo - Night Drive"

    def test_em_and_en_dash(self) -> None:
        assert normalize_template_base("A—B–C") == "A - B - C"

    def test_single_hyphen_inside_word_kept(self) -> None:
        assert normalize_template_base("Jay-Z  -  Lo-Fi") == "Jay-Z - Lo-Fi"


class TestCatalogCodes:
    @pytest.mark.parametrize("token", ["ABC123", "2xl004", "cat01"])
    def test_codes(self, token: str) -> None:
        assert is_catalog_code(token)

    @pytest.mark.parametrize("token", ["Drive", "1234", "A1", "mix-01"])
    def test_not_codes(self, token: str) -> None:
        assert not is_catalog_code(token)

    def test_strip_trailing(self) -> None:
        assert strip_trailing_code_tokens("Night Drive ABC123 x") == "Night Drive"

    def test_strip_keeps_inner_codes(self) -> None:
        assert strip_trailing_code_tokens("ABC123 Night Drive") == "ABC123 Night Drive"


class TestTrackNumbers:
    def test_prefix(self) -> None:
        assert extract_track_prefix("03. Night Drive") == ("03", "Night Drive")
        assert extract_track_prefix("7_Night Drive") == ("7", "Night Drive")

    def test_prefix_needs_separator(self) -> None:
        assert extract_track_prefix("Night Drive") is None
        assert extract_track_prefix("123 Night") is None

    def test_number(self) -> None:
        assert extract_track_number("01 Track One") == "01"
        assert extract_track_number("Track One") == ""

    def test_clean_track_title(self) -> None:
        assert clean_track_title("03. Night Drive", 3) == "Night Drive"
        assert clean_track_title("3 - Night Drive", 3) == "Night Drive"
        assert clean_track_title("04. Night Drive", 3) == "04. Night Drive"


class TestNormalizeForMatch:
    def test_basic(self) -> None:
        assert normalize_for_match("03. DJ Foo - Night Drive (128 bpm)") == "dj foo night drive"

    def test_trailing_code_removed(self) -> None:
        assert normalize_for_match("Night Drive [ABC123]") == "night drive"

    def test_empty(self) -> None:
        assert normalize_for_match("") == ""

    @pytest.mark.parametrize(
        "raw",
        [
            "01 - DJ Foo - Night Drive (128 bpm) CAT001.flac",
            "Night Drive [ABC123] x",
            "05_Artist_-_Title (Original Mix)",
            "  12. Some---thing—Else 140BPM  ",
            "A.B.C.",
        ],
    )
    def test_idempotent(self, raw: str) -> None:
        once = normalize_for_match(raw)
        assert normalize_for_match(once) == once


class TestTokenOverlap:
    def test_disjoint(self) -> None:
        assert not has_token_overlap("night drive", "totally unrelated")

    def test_shared(self) -> None:
        assert has_token_overlap("night drive", "drive home")

    def test_empty(self) -> None:
        assert not has_token_overlap("", "night")
