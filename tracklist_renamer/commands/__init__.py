"""Command discovery and registration."""

from __future__ import annotations

import importlib
import pkgutil

import click

# Exit codes per CLI contract (0 is success)
EXIT_CONFIG_ERROR = 1
EXIT_FETCH_ERROR = 2
EXIT_PARSE_ERROR = 3
EXIT_AI_ERROR = 4
EXIT_SCAN_ERROR = 5


def discover_commands() -> list[click.Command]:
    """Click commands exported as ``cli`` by the public modules of this package.

    Returns:
        Commands sorted by name. A later module exporting the same name
        replaces an earlier one.
    """
    commands: dict[str, click.Command] = {}
    for module_info in pkgutil.iter_modules(__path__):
        if module_info.name.startswith("_"):
            continue
        module = importlib.import_module(f"{__name__}.{module_info.name}")
        cmd = getattr(module, "cli", None)
        if isinstance(cmd, click.Command) and cmd.name:
            commands[cmd.name] = cmd
    return [commands[name] for name in sorted(commands)]
