"""Configuration management for tracklist-renamer."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from tracklist_renamer.engine.matcher import BEATPORT_MIN_CONFIDENCE
from tracklist_renamer.exceptions import (
    ConfigParseError,
    ConfigValidationError,
    TemplateRenderError,
)
from tracklist_renamer.naming import DEFAULT_FORMAT, validate_format
from tracklist_renamer.stores.client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

DEFAULT_AI_MODEL = "gemini-2.5-flash-lite"


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "tracklist-renamer" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        colored_output: Whether to use colored terminal output.
        naming_format: Preset name or Jinja2 template for template and
            AI renames.
        beatport_min_confidence: Acceptance floor for Beatport matches.
        user_agent: User-Agent header for store requests.
        http_timeout: Store request timeout in seconds.
        ai_api_key: Gemini API key (None if not configured).
        ai_model: Gemini model name.
        config_path: Path where config was loaded from (None if defaults).
    """

    colored_output: bool = True
    naming_format: str = DEFAULT_FORMAT
    beatport_min_confidence: float = BEATPORT_MIN_CONFIDENCE
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout: float = DEFAULT_TIMEOUT
    ai_api_key: str | None = None
    ai_model: str = DEFAULT_AI_MODEL
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.
        """
        warnings: list[str] = []

        if not 0.0 <= self.beatport_min_confidence <= 1.0:
            warnings.append(
                f"matching.beatport_min_confidence={self.beatport_min_confidence} "
                f"is outside valid range 0-1"
            )

        if self.http_timeout <= 0:
            warnings.append(
                f"http.timeout={self.http_timeout} must be positive, "
                f"using {DEFAULT_TIMEOUT:g}"
            )
            self.http_timeout = DEFAULT_TIMEOUT

        try:
            validate_format(self.naming_format)
        except TemplateRenderError as e:
            warnings.append(f"naming.format is unusable ({e}), using {DEFAULT_FORMAT!r}")
            self.naming_format = DEFAULT_FORMAT

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values have the wrong type.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: tracklist-renamer init-config"
        )
        return config, warnings + config.validate()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    return config, warnings + config.validate()


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigValidationError(name, value, "must be a table")
    return value


def _number(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(key, value, "must be a number")
    return float(value)


def _string(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigValidationError(key, value, "must be a string")
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [display] section
    display = _section(data, "display")
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be true or false")
        config.colored_output = value

    # Parse [naming] section
    naming = _section(data, "naming")
    if "format" in naming:
        config.naming_format = _string("naming.format", naming["format"])

    # Parse [matching] section
    matching = _section(data, "matching")
    if "beatport_min_confidence" in matching:
        config.beatport_min_confidence = _number(
            "matching.beatport_min_confidence", matching["beatport_min_confidence"]
        )

    # Parse [http] section
    http = _section(data, "http")
    if "user_agent" in http:
        config.user_agent = _string("http.user_agent", http["user_agent"])
    if "timeout" in http:
        config.http_timeout = _number("http.timeout", http["timeout"])

    # Parse [ai] section
    ai = _section(data, "ai")
    if "api_key" in ai:
        value = ai["api_key"]
        if value is not None and not isinstance(value, str):
            raise ConfigValidationError("ai.api_key", value, "must be a string")
        config.ai_api_key = value or None
    if "model" in ai:
        config.ai_model = _string("ai.model", ai["model"])

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Only values that differ from the defaults are written.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "display": {
            "colored_output": config.colored_output,
        },
        "naming": {
            "format": config.naming_format,
        },
    }

    if config.beatport_min_confidence != BEATPORT_MIN_CONFIDENCE:
        data["matching"] = {"beatport_min_confidence": config.beatport_min_confidence}

    http_data: dict[str, Any] = {}
    if config.user_agent != DEFAULT_USER_AGENT:
        http_data["user_agent"] = config.user_agent
    if config.http_timeout != DEFAULT_TIMEOUT:
        http_data["timeout"] = config.http_timeout
    if http_data:
        data["http"] = http_data

    ai_data: dict[str, Any] = {}
    if config.ai_api_key:
        ai_data["api_key"] = config.ai_api_key
    if config.ai_model != DEFAULT_AI_MODEL:
        ai_data["model"] = config.ai_model
    if ai_data:
        data["ai"] = ai_data

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
    config_path.chmod(0o600)
