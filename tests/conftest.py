"""Shared pytest fixtures."""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

# Importing the group registers every command before command modules
# are imported on their own by individual tests.
import tracklist_renamer.cli  # noqa: F401

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[display]
colored_output = false

[naming]
format = "Track. Title"

[matching]
beatport_min_confidence = 0.4

[http]
timeout = 10

[ai]
api_key = "test-key"
""")
    return config_path


@pytest.fixture
def album_dir(temp_dir: Path) -> Path:
    """Album folder with three audio files and one non-audio file."""
    folder = temp_dir / "album"
    folder.mkdir()
    for name in (
        "02 - night drive.mp3",
        "01 - Sunrise.flac",
        "03 - Outro.wav",
        "cover.jpg",
    ):
        (folder / name).write_bytes(b"")
    return folder


def _bandcamp_page(blob: dict) -> str:
    """Minimal Bandcamp album page carrying *blob* as tralbum data."""
    data = json.dumps(blob).replace("&", "&amp;").replace('"', "&quot;")
    return (
        "<html><head>"
        f'<script type="text/javascript" src="/x.js" data-tralbum="{data}"></script>'
        "</head><body></body></html>"
    )


@pytest.fixture
def bandcamp_html() -> str:
    """Bandcamp page for "Night Moves" by DJ Foo with three tracks."""
    return _bandcamp_page(
        {
            "artist": "DJ Foo",
            "current": {"title": "Night Moves"},
            "trackinfo": [
                {"title": "Sunrise", "artist": None, "track_num": 1},
                {"title": "Night Drive", "artist": None, "track_num": 2},
                {"title": "Outro", "artist": None, "track_num": 3},
            ],
        }
    )


@pytest.fixture
def make_bandcamp_page() -> Callable[[dict], str]:
    """Factory for Bandcamp pages with custom tralbum data."""
    return _bandcamp_page
