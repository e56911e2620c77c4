"""Exception hierarchy for tracklist-renamer."""

from pathlib import Path


class TracklistRenamerError(Exception):
    """Base exception for all tracklist-renamer errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all tracklist-renamer errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(TracklistRenamerError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Store Errors
class FetchError(TracklistRenamerError):
    """Store page could not be fetched (network failure or non-200 status)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class AlbumDataError(TracklistRenamerError):
    """Album data on a store page is missing or malformed."""

    def __init__(self, url: str, message: str, snippet: str = "") -> None:
        self.url = url
        self.message = message
        self.snippet = snippet
        super().__init__(f"{message} ({url})" if url else message)


class AlbumDataNotFoundError(AlbumDataError):
    """No recognizable album data was found on the page."""

    pass


class AlbumDataDecodeError(AlbumDataError):
    """Album data was found but could not be decoded."""

    pass


# Local Library Errors
class ScanError(TracklistRenamerError):
    """Album folder could not be scanned."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot scan {path}: {reason}")


# AI Errors
class AIParseError(TracklistRenamerError):
    """AI-assisted filename parsing failed."""

    pass


# Naming Errors
class TemplateRenderError(TracklistRenamerError):
    """Raised when a naming template cannot be rendered."""

    pass
