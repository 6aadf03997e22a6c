"""Allow ``python -m blackmamba``."""

from blackmamba.cli import cli

cli()
