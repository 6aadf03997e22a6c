"""Shared pytest fixtures and test helpers for blackmamba tests."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import textwrap
from collections.abc import Generator
from pathlib import Path, PurePosixPath
from typing import Any

import pytest
from click.testing import CliRunner

from blackmamba.runtime.engine import BlackMamba

GREETER_SOURCE = """\
from types import SimpleNamespace


def factory(_dependencies):
    def construct(_settings):
        return SimpleNamespace(greet=lambda name: f"Hello {name}")

    return construct
"""

MESSAGE_SOURCE = """\
def factory(_dependencies):
    def construct(settings):
        return lambda: settings["message"]

    return construct
"""


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    bm = logging.getLogger("blackmamba")
    bm_level = bm.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    bm.setLevel(bm_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Temporary project with ``packages/`` and ``sources/`` directories.

    Ships the ``greeter`` package used across runtime, service and CLI tests.
    """
    (tmp_path / "packages").mkdir()
    (tmp_path / "sources").mkdir()
    write_package(tmp_path, "greeter", {"name": "greeter", "source": "greeter.py"})
    write_source(tmp_path, "greeter.py", GREETER_SOURCE)
    return tmp_path


@pytest.fixture
def runtime(project: Path) -> BlackMamba:
    """Runtime rooted at the temporary project."""
    return BlackMamba(root_directory=str(project))


@pytest.fixture
def _in_project(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temporary project so the CLI picks it up.

    Use via ``@pytest.mark.usefixtures("_in_project")`` on command test classes.
    """
    monkeypatch.delenv("BLACKMAMBA_CONFIG", raising=False)
    monkeypatch.chdir(project)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_package(root: Path, package_id: str, descriptor: Any) -> Path:
    """Write ``<root>/packages/<package_id>.json``."""
    path = root / "packages" / f"{package_id.lstrip('/')}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(descriptor), encoding="utf-8")
    return path


def write_source(root: Path, name: str, code: str) -> Path:
    """Write ``<root>/sources/<name>`` with dedented *code*."""
    path = root / "sources" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(code), encoding="utf-8")
    return path


def _key(path: Path, directory: str, *, strip_suffix: bool) -> str:
    relative = PurePosixPath(path.as_posix()).relative_to(directory)
    return str(relative.with_suffix("")) if strip_suffix else str(relative)


class MemoryPackages:
    """In-memory descriptor loader keyed by package id; records every call.

    Yields to the event loop once per load so concurrent registrations can
    interleave the way real I/O would.
    """

    def __init__(self, packages: dict[str, Any]) -> None:
        self.packages = packages
        self.calls: list[str] = []

    async def __call__(self, path: Path) -> Any:
        key = _key(path, "packages", strip_suffix=True)
        self.calls.append(key)
        await asyncio.sleep(0)
        return copy.deepcopy(self.packages[key])


class MemorySources:
    """In-memory source importer keyed by source path; records every call."""

    def __init__(self, sources: dict[str, Any]) -> None:
        self.sources = sources
        self.calls: list[str] = []

    async def __call__(self, path: Path) -> Any:
        key = _key(path, "sources", strip_suffix=False)
        self.calls.append(key)
        return self.sources[key]


def memory_runtime(
    packages: dict[str, Any],
    sources: dict[str, Any],
    **kwargs: Any,
) -> tuple[BlackMamba, MemoryPackages, MemorySources]:
    """Runtime wired to in-memory loaders (root directory left empty)."""
    load_json = MemoryPackages(packages)
    import_file = MemorySources(sources)
    rt = BlackMamba(load_json=load_json, import_file=import_file, **kwargs)
    return rt, load_json, import_file
