"""Jinja2 rendering of proposed filenames.

A naming format is either one of the preset names shown in the UI
("Track. Artist - Title", "Track. Title") or a Jinja2 template string
using the ``track``, ``artist``, ``title`` and ``bpm`` variables.
"""

from __future__ import annotations

import re

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from tracklist_renamer.exceptions import TemplateRenderError

FORMAT_ARTIST_TITLE = "Track. Artist - Title"
FORMAT_TITLE = "Track. Title"
DEFAULT_FORMAT = FORMAT_ARTIST_TITLE

PRESET_FORMATS: dict[str, str] = {
    FORMAT_ARTIST_TITLE: (
        "{% if track %}{{ track }}. {% endif %}"
        "{% if artist %}{{ artist }} - {% endif %}{{ title }}"
    ),
    FORMAT_TITLE: "{% if track %}{{ track }}. {% endif %}{{ title }}",
}

_MULTI_SPACE = re.compile(r"\s+")
_PATH_SEPARATORS = re.compile(r"[/\\]")


def _make_env() -> Environment:
    """Create a Jinja2 environment for filename templates."""
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=False,
    )


_env = _make_env()


def resolve_format(fmt: str) -> str:
    """Return the Jinja2 source for a preset name or a raw template."""
    return PRESET_FORMATS.get(fmt, fmt)


def format_track_number(track: str) -> str:
    """Zero-pad numeric track numbers to two digits; keep anything else."""
    track = track.strip()
    if track.isdecimal():
        return f"{int(track):02d}"
    return track


def safe_filename(name: str) -> str:
    """Keep a proposed name inside its folder and collapse whitespace."""
    name = _PATH_SEPARATORS.sub("-", name)
    return _MULTI_SPACE.sub(" ", name).strip()


def render_name(fmt: str, metadata: dict[str, str]) -> str:
    """Render a naming format with track metadata.

    Raises:
        TemplateRenderError: If the template has syntax errors or uses
            an unknown variable.
    """
    try:
        template = _env.from_string(resolve_format(fmt))
    except TemplateSyntaxError as e:
        raise TemplateRenderError(f"Invalid naming template: {e}") from e
    try:
        return template.render(**metadata)
    except UndefinedError as e:
        raise TemplateRenderError(f"Naming template references unknown variable: {e}") from e


def build_filename(
    fmt: str,
    *,
    track: str,
    artist: str,
    title: str,
    bpm: str = "",
    ext: str = "",
) -> str:
    """Render a complete filename, re-appending the original extension."""
    rendered = render_name(
        fmt,
        {
            "track": format_track_number(track),
            "artist": artist.strip(),
            "title": title.strip(),
            "bpm": bpm,
        },
    )
    return safe_filename(rendered) + ext


def validate_format(fmt: str) -> None:
    """Raise TemplateRenderError if *fmt* cannot render a sample track."""
    build_filename(fmt, track="1", artist="Artist", title="Title", bpm="120")
