"""Command dispatch against built modules.

A module exposes its commands either as a mapping of command name to
handler or as callable attributes. Handlers may be plain or async.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from blackmamba.domain.errors import ExecutionError


def resolve_command(module_id: str, module: Any, cmd: str) -> Callable[[Any], Any]:
    """Return the handler for *cmd* on *module*, or raise ExecutionError.

    Names starting with ``_`` are never commands.
    """
    if cmd.startswith("_"):
        raise ExecutionError(module_id, cmd, f"module {module_id} member {cmd!r} is private")
    if isinstance(module, Mapping):
        handler = module.get(cmd)
    else:
        handler = getattr(module, cmd, None)

    if handler is None:
        raise ExecutionError(module_id, cmd)
    if not callable(handler):
        raise ExecutionError(
            module_id,
            cmd,
            f"module {module_id} member {cmd!r} is a {type(handler).__name__}, not a command",
        )
    return handler


async def invoke(handler: Callable[[Any], Any], data: Any) -> Any:
    """Call *handler* with *data*, awaiting the result when it is awaitable."""
    result = handler(data)
    if inspect.isawaitable(result):
        return await result
    return result
