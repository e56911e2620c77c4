"""Unit tests for the filename template parser."""

from __future__ import annotations

import pytest

from tracklist_renamer.engine.template import (
    CONF_AMPERSAND,
    CONF_FIRST_TOKEN,
    CONF_LABEL_PREFIX,
    CONF_LEGACY,
    CONF_NUMBERED_ARTIST,
    CONF_NUMBERED_PARTS,
    CONF_TAGS,
    CONF_VS,
    append_bpm_if_missing,
    build_template_candidate,
    choose_best_candidate,
    generate_template_renames,
    parse_legacy_template,
    split_template_parts,
    split_template_parts_loose,
)
from tracklist_renamer.models import (
    BPM_STYLE_COMPACT,
    BPM_STYLE_SPACE,
    STATUS_MATCHED,
    STATUS_NO_MATCH,
    LocalTrack,
    TemplateCandidate,
)
from tracklist_renamer.naming import FORMAT_TITLE


def _local(name: str, artist: str = "", title: str = "") -> LocalTrack:
    return LocalTrack(path=f"/music/{name}", original_name=name, tag_artist=artist, tag_title=title)


class TestSplitting:
    def test_split_drops_trailing_code(self) -> None:
        assert split_template_parts("DJ Foo - Night Drive - ABC123") == ["DJ Foo", "Night Drive"]

    def test_split_keeps_single_part(self) -> None:
        assert split_template_parts("ABC123") == ["ABC123"]

    def test_loose_needs_two_hyphens(self) -> None:
        assert split_template_parts_loose("Jay-Z") == ["Jay-Z"]
        assert split_template_parts_loose("Artist-Album-Title") == ["Artist", "Album", "Title"]


class TestLegacyTemplate:
    def test_with_bpm(self) -> None:
        cand = parse_legacy_template("DJ Foo - Album - 03 Night Drive (128)")
        assert cand is not None
        assert (cand.artist, cand.title, cand.track, cand.bpm) == ("DJ Foo", "Night Drive", "03", "128")
        assert cand.bpm_style == BPM_STYLE_COMPACT

    def test_no_match(self) -> None:
        assert parse_legacy_template("DJ Foo - Night Drive") is None


class TestBuildTemplateCandidate:
    def test_legacy_with_spaced_bpm(self) -> None:
        cand = build_template_candidate(_local("DJ Foo - Cool Track - 03 Night Drive (128 bpm).flac"))
        assert cand.artist == "DJ Foo"
        assert cand.title == "Night Drive"
        assert cand.track == "03"
        assert cand.bpm == "128"
        assert cand.bpm_style == BPM_STYLE_SPACE
        assert cand.confidence == CONF_LEGACY

    def test_numbered_artist(self) -> None:
        cand = build_template_candidate(_local("01. Artist - Title.mp3"))
        assert (cand.artist, cand.title, cand.track) == ("Artist", "Title", "01")
        assert cand.confidence == CONF_NUMBERED_ARTIST

    def test_numbered_parts(self) -> None:
        cand = build_template_candidate(_local("01 - DJ Foo - Night Drive.mp3"))
        assert (cand.artist, cand.title, cand.track) == ("DJ Foo", "Night Drive", "01")
        assert cand.confidence == CONF_NUMBERED_PARTS

    def test_label_prefix(self) -> None:
        cand = build_template_candidate(_local("Some Records - DJ Foo - Night Drive.mp3"))
        assert (cand.artist, cand.title) == ("DJ Foo", "Night Drive")
        assert cand.confidence == CONF_LABEL_PREFIX

    def test_vs_joins_artists(self) -> None:
        cand = build_template_candidate(_local("DJ Foo vs Bar Night Drive.mp3"))
        assert cand.artist == "DJ Foo Vs. Bar"
        assert cand.title == "Night Drive"
        assert cand.confidence == CONF_VS

    def test_ampersand_joins_artists(self) -> None:
        cand = build_template_candidate(_local("Foo & Bar Night Drive.mp3"))
        assert (cand.artist, cand.title) == ("Foo & Bar", "Night Drive")
        assert cand.confidence == CONF_AMPERSAND

    def test_first_token_fallback(self) -> None:
        cand = build_template_candidate(_local("Artist Title.mp3"))
        assert (cand.artist, cand.title) == ("Artist", "Title")
        assert cand.confidence == CONF_FIRST_TOKEN

    def test_single_word_is_unusable(self) -> None:
        assert build_template_candidate(_local("Intro.mp3")) == TemplateCandidate()

    def test_numeric_tail_without_bpm_is_ambiguous(self) -> None:
        assert build_template_candidate(_local("Artist - Title - 128.mp3")) == TemplateCandidate()

    def test_numeric_tail_wins_over_tags(self) -> None:
        track = _local("Artist - Title - 128.mp3", artist="Artist", title="Title")
        assert build_template_candidate(track) == TemplateCandidate()

    def test_agreeing_tags_override(self) -> None:
        track = _local("dj foo night drive.mp3", artist="DJ Foo", title="Night Drive (Original Mix)")
        cand = build_template_candidate(track)
        assert (cand.artist, cand.title) == ("DJ Foo", "Night Drive (Original Mix)")
        assert cand.confidence == CONF_TAGS

    def test_unrelated_tags_ignored(self) -> None:
        track = _local("dj foo night drive.mp3", artist="Someone", title="Else")
        cand = build_template_candidate(track)
        assert cand.artist != "Someone"
        assert cand.usable

    def test_tag_override_keeps_filename_bpm(self) -> None:
        track = _local("DJ Foo - Night Drive 128bpm.mp3", artist="DJ Foo", title="Night Drive")
        cand = build_template_candidate(track)
        assert cand.confidence == CONF_TAGS
        assert (cand.bpm, cand.bpm_style) == ("128", BPM_STYLE_COMPACT)

    @pytest.mark.parametrize(
        "name",
        [
            "Intro.mp3",
            "01.mp3",
            "Artist - Title - 128.mp3",
            "DJ Foo - Night Drive.flac",
            "03 - Night Drive.wav",
            "x.aiff",
            "--.mp3",
            "A vs B.mp3",
            "Label Records - Artist.mp3",
        ],
    )
    def test_artist_and_title_set_together(self, name: str) -> None:
        cand = build_template_candidate(_local(name))
        assert bool(cand.artist) == bool(cand.title)


class TestChooseBestCandidate:
    def test_tie_keeps_first(self) -> None:
        a = TemplateCandidate(artist="A", title="T", confidence=0.6)
        b = TemplateCandidate(artist="B", title="T", confidence=0.6)
        assert choose_best_candidate([a, b]) is a

    def test_skips_unusable(self) -> None:
        a = TemplateCandidate(artist="A", title="", confidence=0.99)
        b = TemplateCandidate(artist="B", title="T", confidence=0.4)
        assert choose_best_candidate([None, a, b]) is b

    def test_none_usable(self) -> None:
        assert choose_best_candidate([None]) == TemplateCandidate()


class TestAppendBpm:
    def test_appends(self) -> None:
        assert append_bpm_if_missing("Night Drive", "128", BPM_STYLE_SPACE) == "Night Drive (128 bpm)"

    def test_already_present(self) -> None:
        assert append_bpm_if_missing("Night Drive 128 BPM", "128", BPM_STYLE_SPACE) == (
            "Night Drive 128 BPM"
        )


class TestGenerateTemplateRenames:
    def test_legacy_name(self) -> None:
        [result] = generate_template_renames(
            [_local("DJ Foo - Cool Track - 03 Night Drive (128 bpm).flac")]
        )
        assert result.proposed_name == "03. DJ Foo - Night Drive (128 bpm).flac"
        assert result.status == STATUS_MATCHED
        assert result.confidence == CONF_LEGACY

    def test_title_only_format(self) -> None:
        [result] = generate_template_renames([_local("01. Artist - Title.mp3")], FORMAT_TITLE)
        assert result.proposed_name == "01. Title.mp3"

    def test_legacy_bare_bpm_rendered_compact(self) -> None:
        [result] = generate_template_renames([_local("DJ Foo - Album - 03 Night Drive (128).mp3")])
        assert result.proposed_name == "03. DJ Foo - Night Drive (128Bpm).mp3"

    def test_custom_jinja_format(self) -> None:
        [result] = generate_template_renames(
            [_local("01 - DJ Foo - Night Drive.mp3")], "{{ artist }} - {{ title }}"
        )
        assert result.proposed_name == "DJ Foo - Night Drive.mp3"

    def test_unparseable_keeps_name(self) -> None:
        [result] = generate_template_renames([_local("Intro.mp3")])
        assert result.proposed_name == "Intro.mp3"
        assert result.status == STATUS_NO_MATCH
        assert not result.changed
