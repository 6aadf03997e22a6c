"""Pluggy hook specifications for runtime lifecycle events.

Hooks fire synchronously on the completing path of the runtime operation.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("blackmamba")
hookimpl = pluggy.HookimplMarker("blackmamba")


class BlackMambaHookSpec:
    """Hook specifications for the blackmamba plugin system."""

    @hookspec
    def post_register(self, package_id: str, built: bool) -> None:
        """Called after a package was registered (built module or builder)."""

    @hookspec
    def post_execute(self, package_id: str, command: str) -> None:
        """Called after a command returned successfully."""

    @hookspec
    def on_fallback(self, requested: str, fallback: str, error: str) -> None:
        """Called when execute_with_fallback switches to the default app."""
