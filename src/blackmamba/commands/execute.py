"""Command: execute one command on a package module."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from blackmamba.commands._base import BmCommand

if TYPE_CHECKING:
    from blackmamba.commands._context import AppContext


@click.command(
    "exec",
    cls=BmCommand,
    examples="""\
  blackmamba exec greeter greet John
  blackmamba exec calculator add '{"a": 1, "b": 2}' --json-data
  blackmamba exec shouter shout 'Hey' --fallback
  blackmamba --json exec greeter greet John""",
)
@click.argument("app")
@click.argument("cmd")
@click.argument("data", required=False)
@click.option("--json-data", is_flag=True, help="Parse DATA as JSON instead of a plain string.")
@click.option("--fallback", is_flag=True, help="Use the configured default app if APP fails.")
@click.pass_obj
def exec_cmd(
    app_ctx: AppContext,
    app: str,
    cmd: str,
    data: str | None,
    json_data: bool,
    fallback: bool,
) -> None:
    """Run CMD on the module registered as APP, passing DATA."""
    from blackmamba.services.execute import ExecuteService

    payload: Any = data
    if json_data and data is not None:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"DATA is not valid JSON: {exc}", param_hint="DATA") from exc

    svc = ExecuteService(app_ctx.runtime)
    app_ctx.call(svc.execute(app, cmd, payload, fallback=fallback))
