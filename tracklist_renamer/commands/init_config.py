"""Write a starter configuration file for tracklist-renamer."""

from __future__ import annotations

import re
from importlib import resources
from pathlib import Path

import click
import tomli_w

from tracklist_renamer.cli import Context, pass_context
from tracklist_renamer.config import get_default_config_path, load_config
from tracklist_renamer.exceptions import TemplateRenderError
from tracklist_renamer.naming import validate_format
from tracklist_renamer.utils.fileops import secure_mkdir
from tracklist_renamer.utils.output import error, info, success, warning

# Active (uncommented) keys in the bundled example
_FORMAT_LINE = re.compile(r"^format = .*$", re.MULTILINE)
_API_KEY_LINE = re.compile(r"^# api_key = .*$", re.MULTILINE)


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("tracklist_renamer").joinpath("config.example.toml").read_text()


def _toml_line(key: str, value: str) -> str:
    return tomli_w.dumps({key: value}).strip()


def render_config(fmt: str | None = None, api_key: str | None = None) -> str:
    """Example config with the naming format and API key filled in.

    Comments and the remaining defaults are kept as shipped.
    """
    content = _load_example_config()
    if fmt is not None:
        content = _FORMAT_LINE.sub(lambda _: _toml_line("format", fmt), content, count=1)
    if api_key:
        content = _API_KEY_LINE.sub(lambda _: _toml_line("api_key", api_key), content, count=1)
    return content


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/tracklist-renamer/config.toml)",
)
@click.option(
    "--format",
    "fmt",
    default=None,
    help='Naming format to store, e.g. "Track. Title" or a Jinja2 template',
)
@click.option(
    "--api-key",
    default=None,
    help="Gemini API key to store for the ai command",
)
@pass_context
def cli(
    ctx: Context,
    force: bool,
    output: Path | None,
    fmt: str | None,
    api_key: str | None,
) -> None:
    """Create a configuration file with every option documented.

    The naming format and the Gemini API key can be set right away;
    all other options keep their defaults. The written file is read
    back and checked before the command reports success.

    Examples:

    \b
      tracklist-renamer init-config

    \b
      tracklist-renamer init-config --format "Track. Title" --api-key KEY

    \b
      tracklist-renamer init-config --output ./config.toml --force
    """
    if fmt is not None:
        try:
            validate_format(fmt)
        except TemplateRenderError as e:
            error(str(e), hint='Use "Track. Artist - Title", "Track. Title" or a Jinja2 template')
            raise SystemExit(1) from e

    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    secure_mkdir(config_path.parent)

    try:
        config_path.write_text(render_config(fmt, api_key))
        config_path.chmod(0o600)
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1) from e

    config, warnings = load_config(config_path)
    for warn in warnings:
        warning(warn)

    success(f"Created config file: {config_path}")
    if not ctx.quiet:
        info(f"Naming format: {config.naming_format}")
        if config.ai_api_key:
            info(f"AI: {config.ai_model} with the stored API key")
        else:
            info(f"AI: {config.ai_model}, API key read from GEMINI_API_KEY")
