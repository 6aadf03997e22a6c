"""Entry point of the ``blackmamba`` command."""

from __future__ import annotations

from pathlib import Path

import click

from blackmamba import __version__
from blackmamba.commands import register_commands
from blackmamba.commands._base import BmGroup
from blackmamba.commands._context import AppContext
from blackmamba.config.settings import BmSettings


@click.group(
    cls=BmGroup,
    invoke_without_command=True,
    examples="""\
        blackmamba exec greeter greet John
        blackmamba --json inspect graph app
        blackmamba -c ./deploy/blackmamba.toml run batch.json
    """,
)
@click.version_option(version=__version__, prog_name="blackmamba")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the bare result.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs and error details.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read this TOML file instead of searching for blackmamba.toml.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: Path | None,
) -> None:
    """blackmamba: build modules from package descriptors and run their commands."""
    ctx.obj = AppContext(
        BmSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
