"""Finding the project a command runs in.

A project is the directory holding ``blackmamba.toml``. The file is looked
up from the working directory towards the filesystem root, unless
``BLACKMAMBA_CONFIG`` or ``--config`` names one directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "blackmamba.toml"
CONFIG_ENV_VAR = "BLACKMAMBA_CONFIG"


@dataclass(frozen=True)
class ProjectLocation:
    """Where relative paths are anchored and which config file applies."""

    root: Path
    config_path: Path | None = None


def find_config(start: Path | None = None) -> Path | None:
    """Nearest ``blackmamba.toml`` at or above *start* (default: cwd).

    ``BLACKMAMBA_CONFIG`` wins when set; a value naming no file means no
    config at all, not a fallback to the search.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_project(
    *, start: Path | None = None, config_path: Path | None = None
) -> ProjectLocation:
    """Resolve the project root and config file for one invocation.

    An explicit *start* is the root. Otherwise the root is the directory of
    the config file, or the cwd when there is none. An explicit
    *config_path* that is not a file is ignored.
    """
    if config_path is not None:
        config = config_path if config_path.is_file() else None
    else:
        config = find_config(start)

    if start is not None:
        root = start
    elif config is not None:
        root = config.resolve().parent
    else:
        root = Path.cwd()
    return ProjectLocation(root=root, config_path=config)
