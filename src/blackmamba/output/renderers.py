"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from blackmamba.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from blackmamba.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "execute":
        return _plain(result.data.get("result"))
    if result.op == "run":
        return "\n".join(_plain(step.get("result")) for step in result.data.get("items", []))
    if result.op == "graph":
        return "\n".join(result.data.get("build_order", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _plain(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="bm.ok"), Text(f"  {result.op}", style="bm.op"), end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="bm.key")
    if key in ("id", "app", "pkg"):
        v = Text(str(value), style="bm.id")
    elif key in ("path", "source"):
        v = Text(str(value), style="bm.path")
    elif key == "result":
        v = Text(_plain(value), style="bm.value")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="bm.error")
    op = Text(f"  {result.op}", style="bm.op")
    console.print(label, op, Text(" — "), Text(msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_execute(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "app", d.get("app"))
    _field(console, "cmd", d.get("cmd"))
    if d.get("fallback"):
        _field(console, "fallback", True)
    _field(console, "result", d.get("result"))


def _render_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        _field(console, "count", 0)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Package", style="bm.id", no_wrap=True)
    table.add_column("Command")
    table.add_column("Result", style="bm.value")
    for step in items:
        table.add_row(
            str(step["index"]),
            Text(step["pkg"]),
            Text(step["cmd"]),
            Text(_plain(step.get("result"))),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} commands")


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    lines = [f"kind: {d.get('kind')}", f"path: {d.get('path')}"]
    if d.get("source"):
        lines.append(f"source: {d['source']}")
    if d.get("builder"):
        lines.append(f"builder: {d['builder']}")
    if d.get("factory_settings"):
        lines.append(f"settings: {json.dumps(d['factory_settings'], separators=(',', ':'))}")
    for dep in d.get("packages", []):
        flag = "" if dep.get("build", True) else " (builder)"
        lines.append(f"package {dep['id']} as {dep['name']}{flag}")
    for dep in d.get("sources", []):
        export = f".{dep['method']}" if dep.get("method") else ""
        lines.append(f"source {dep['id']}{export} as {dep['binding']}")

    title = Text(f"{d.get('id', '?')} — {d.get('name', '')}")
    border = f"bm.kind.{d.get('kind', 'source')}"
    panel = Panel(Text("\n".join(lines)), title=title, border_style=border, expand=False)
    console.print(panel)


def _render_graph(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    console.print(Text("  build order:", style="bm.key"))
    for position, node in enumerate(d.get("build_order", []), start=1):
        console.print(Text.assemble(f"    {position}. ", (node, "bm.id")))

    if verbose:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("From", style="bm.id", no_wrap=True)
        table.add_column("To", no_wrap=True)
        table.add_column("Kind")
        table.add_column("As")
        for edge in d.get("edges", []):
            table.add_row(
                Text(edge["source"]),
                Text(edge["target"]),
                edge["kind"],
                Text(str(edge.get("name", ""))),
            )
        console.print()
        console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "execute": _render_execute,
    "run": _render_run,
    "describe": _render_describe,
    "graph": _render_graph,
}
