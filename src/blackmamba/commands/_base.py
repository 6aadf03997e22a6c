"""Click command classes that understand an ``examples=`` keyword.

A command given examples grows an eager ``--examples`` flag that prints
them and exits, so ``--help`` stays short.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


class ExamplesMixin:
    """Adds ``examples`` and the matching ``--examples`` flag to a Click command."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = textwrap.dedent(examples).strip("\n") if examples else None
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples and exit.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in (self.examples or "").splitlines():
            click.echo(f"  {line}" if line else "")
        ctx.exit()


class BmCommand(ExamplesMixin, click.Command):
    pass


class BmGroup(ExamplesMixin, click.Group):
    """Group whose ``@group.command(...)`` subcommands are :class:`BmCommand`."""

    command_class = BmCommand
