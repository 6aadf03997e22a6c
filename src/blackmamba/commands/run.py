"""Command: run a batch file of commands in order."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TextIO

import click

from blackmamba.commands._base import BmCommand

if TYPE_CHECKING:
    from blackmamba.commands._context import AppContext


@click.command(
    cls=BmCommand,
    examples="""\
  blackmamba run batch.json
  cat batch.json | blackmamba run -

  batch.json:
  [{"pkg": "greeter", "cmd": "greet", "data": "John"},
   {"pkg": "greeter", "cmd": "greet", "data": "Jane"}]""",
)
@click.argument("batch_file", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def run(app: AppContext, batch_file: TextIO) -> None:
    """Execute each {pkg, cmd, data} entry of BATCH_FILE in order.

    Stops at the first failure.
    """
    from blackmamba.services.execute import ExecuteService

    try:
        items = json.load(batch_file)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="BATCH_FILE") from exc
    if not isinstance(items, list):
        raise click.BadParameter("must contain a JSON list", param_hint="BATCH_FILE")

    app.call(ExecuteService(app.runtime).run(items))
