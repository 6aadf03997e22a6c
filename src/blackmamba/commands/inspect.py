"""Command group: read-only package inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from blackmamba.commands._base import BmGroup

if TYPE_CHECKING:
    from blackmamba.commands._context import AppContext


@click.group(
    "inspect",
    cls=BmGroup,
    examples="""\
  blackmamba inspect package greeter
  blackmamba inspect graph app
  blackmamba -v inspect graph app""",
)
def inspect_group() -> None:
    """Inspect package descriptors without building anything."""


@inspect_group.command(
    "package",
    examples="""\
  blackmamba inspect package greeter
  blackmamba --json inspect package /subfolder/greeter""",
)
@click.argument("package_id")
@click.pass_obj
def package(app: AppContext, package_id: str) -> None:
    """Show the descriptor of PACKAGE_ID."""
    from blackmamba.services.inspect import InspectService

    app.call(InspectService(app.runtime).describe(package_id))


@inspect_group.command(
    "graph",
    examples="""\
  blackmamba inspect graph app
  blackmamba -q inspect graph app""",
)
@click.argument("package_id")
@click.pass_obj
def graph(app: AppContext, package_id: str) -> None:
    """Show the dependency graph and build order of PACKAGE_ID."""
    from blackmamba.services.inspect import InspectService

    app.call(InspectService(app.runtime).graph(package_id))
