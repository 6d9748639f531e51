"""Subcommand modules for manifestlint.

Provides register_commands() which uses deferred imports to keep
``manifestlint --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from manifestlint.commands.config_cmd import config

    cli.add_command(config)

    # --- Standalone commands ---
    from manifestlint.commands.linters import linters
    from manifestlint.commands.run import run

    cli.add_command(run)
    cli.add_command(linters)
