"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy runtime construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

import click

from blackmamba.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from blackmamba.config.settings import BmSettings
    from blackmamba.runtime.engine import BlackMamba
    from blackmamba.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The runtime is built on first use so ``--help`` and ``--version``
    never touch plugins or the filesystem.
    """

    def __init__(self, settings: BmSettings) -> None:
        self.settings = settings
        self._runtime: BlackMamba | None = None

        from blackmamba.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def runtime(self) -> BlackMamba:
        """The runtime instance (created lazily on first access)."""
        if self._runtime is None:
            from blackmamba.plugins.manager import PluginManager
            from blackmamba.runtime.engine import BlackMamba

            self._runtime = BlackMamba.from_settings(
                self.settings, plugin_manager=PluginManager.from_settings(self.settings)
            )
        return self._runtime

    def call(self, coro: Coroutine[Any, Any, ServiceResult]) -> None:
        """Run a service coroutine to completion and emit its result."""
        self.emit(asyncio.run(coro))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

