"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, blackmamba.toml only contains
overrides.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class DirectoriesConfig(BaseModel):
    """[directories] section."""

    model_config = {"frozen": True}

    root: str = ""
    sources: str = "./sources"
    packages: str = "./packages"


class FallbackConfig(BaseModel):
    """[fallback] section — the default triple for execute_with_fallback."""

    model_config = {"frozen": True}

    app: str | None = None
    cmd: str | None = None
    data: Any = None


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".blackmamba/plugins"
