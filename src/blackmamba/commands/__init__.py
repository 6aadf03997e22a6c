"""Subcommand modules for blackmamba.

Provides register_commands() which uses deferred imports to keep
``blackmamba --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from blackmamba.commands.inspect import inspect_group

    cli.add_command(inspect_group)

    # --- Standalone commands ---
    from blackmamba.commands.execute import exec_cmd
    from blackmamba.commands.run import run

    cli.add_command(exec_cmd)
    cli.add_command(run)
