"""Rich Console factory and theme for blackmamba output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BM_THEME = Theme(
    {
        "bm.ok": "bold green",
        "bm.error": "bold red",
        "bm.op": "bold cyan",
        "bm.key": "dim",
        "bm.id": "bold blue",
        "bm.path": "dim",
        "bm.value": "bold",
        "bm.kind.builder": "green",
        "bm.kind.source": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=BM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
