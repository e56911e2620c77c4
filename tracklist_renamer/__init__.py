"""tracklist-renamer: rename local audio files from online store track listings."""

__version__ = "0.1.0"
