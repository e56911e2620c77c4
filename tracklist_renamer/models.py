"""Data structures shared by the parser, the store extractors and the matcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STATUS_MATCHED = "Matched"
STATUS_NO_MATCH = "No Match"

BPM_STYLE_SPACE = "space"
BPM_STYLE_COMPACT = "compact"


@dataclass(frozen=True, slots=True)
class LocalTrack:
    """An audio file found in the album folder."""

    path: str
    original_name: str
    tag_artist: str = ""
    tag_title: str = ""


@dataclass(frozen=True, slots=True)
class TemplateCandidate:
    """A structured guess parsed from one filename (or its tags).

    The zero value (all fields empty, confidence 0) means no usable
    structure was found.
    """

    artist: str = ""
    title: str = ""
    track: str = ""
    bpm: str = ""
    bpm_style: str = ""
    confidence: float = 0.0

    @property
    def usable(self) -> bool:
        return bool(self.artist) and bool(self.title)


@dataclass(frozen=True, slots=True)
class AlbumTrack:
    """One entry of a remote track listing."""

    title: str
    artist: str = ""
    track_num: int = 0
    track_num_explicit: bool = False
    track_id: int = 0


@dataclass(slots=True)
class AlbumData:
    """A release as scraped from a store page."""

    artist: str = ""
    title: str = ""
    tracks: list[AlbumTrack] = field(default_factory=list)
    source: str = ""


@dataclass(frozen=True, slots=True)
class MatchedTrack:
    """A proposed rename for one local file."""

    local_path: str
    original_name: str
    proposed_name: str
    confidence: float = 0.0
    status: str = STATUS_NO_MATCH

    @property
    def changed(self) -> bool:
        return self.proposed_name != self.original_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "localPath": self.local_path,
            "originalName": self.original_name,
            "proposedNewName": self.proposed_name,
            "confidence": self.confidence,
            "status": self.status,
        }

    @classmethod
    def unmatched(cls, track: LocalTrack) -> MatchedTrack:
        """Build the "No Match" entry that keeps the original name."""
        return cls(
            local_path=track.path,
            original_name=track.original_name,
            proposed_name=track.original_name,
        )
