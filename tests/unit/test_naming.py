"""Unit tests for filename rendering."""

from __future__ import annotations

import pytest

from tracklist_renamer.exceptions import TemplateRenderError
from tracklist_renamer.naming import (
    FORMAT_ARTIST_TITLE,
    FORMAT_TITLE,
    build_filename,
    format_track_number,
    render_name,
    resolve_format,
    safe_filename,
    validate_format,
)


class TestPresets:
    def test_resolve_preset(self) -> None:
        assert "{{ title }}" in resolve_format(FORMAT_TITLE)

    def test_raw_template_passes_through(self) -> None:
        assert resolve_format("{{ title }}") == "{{ title }}"

    def test_artist_title(self) -> None:
        name = build_filename(FORMAT_ARTIST_TITLE, track="3", artist="DJ Foo", title="Night Drive")
        assert name == "03. DJ Foo - Night Drive"

    def test_missing_track_and_artist(self) -> None:
        name = build_filename(FORMAT_ARTIST_TITLE, track="", artist="", title="Night Drive", ext=".mp3")
        assert name == "Night Drive.mp3"


class TestHelpers:
    def test_track_number_padding(self) -> None:
        assert format_track_number("3") == "03"
        assert format_track_number("12") == "12"
        assert format_track_number("A1") == "A1"
        assert format_track_number("\u00b2") == "\u00b2"

    def test_safe_filename(self) -> None:
        assert safe_filename("AC/DC  -  Back\\Black ") == "AC-DC - Back-Black"


class TestTemplates:
    def test_bpm_variable(self) -> None:
        name = build_filename(
            "{{ track }} {{ title }} [{{ bpm }}]", track="1", artist="", title="Intro", bpm="120"
        )
        assert name == "01 Intro [120]"

    def test_syntax_error(self) -> None:
        with pytest.raises(TemplateRenderError):
            render_name("{% if %}", {})

    def test_unknown_variable(self) -> None:
        with pytest.raises(TemplateRenderError):
            validate_format("{{ album }}")

    def test_validate_presets(self) -> None:
        validate_format(FORMAT_ARTIST_TITLE)
        validate_format(FORMAT_TITLE)
