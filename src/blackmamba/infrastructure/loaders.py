"""Default descriptor and source loaders.

Both are plain async callables taking a filesystem path, so a runtime can
be handed any other implementation (an HTTP fetcher, an in-memory table)
with the same signature.
"""

from __future__ import annotations

import asyncio
import hashlib
import importlib.util
import json
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

logger = logging.getLogger(__name__)

SOURCE_MODULE_PREFIX = "blackmamba_source"


async def read_json(path: Path) -> Any:
    """Read and parse a UTF-8 JSON file without blocking the event loop."""
    raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return json.loads(raw)


def source_module_name(path: Path) -> str:
    """Unique ``sys.modules`` key for the source file at *path*."""
    resolved = path.resolve()
    digest = hashlib.sha256(str(resolved).encode("utf-8")).hexdigest()[:12]
    return f"{SOURCE_MODULE_PREFIX}_{resolved.stem}_{digest}"


def load_module_file(path: Path, module_name: str) -> ModuleType:
    """Execute the Python file at *path* as module *module_name*.

    The module is registered in ``sys.modules`` while it executes so that
    dataclasses and pickling inside it work; a failed load is removed again.
    Shared by source imports and local plugin files.
    """
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not create module spec for {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


async def import_source_file(path: Path) -> ModuleType:
    """Load a single source file under a name unique to its resolved path."""
    resolved = path.resolve()
    if not resolved.is_file():
        raise FileNotFoundError(f"No such source file: {resolved}")

    module_name = source_module_name(resolved)
    module = load_module_file(resolved, module_name)
    logger.debug("Imported source %s as %s", resolved, module_name)
    return module
