"""Resolved settings for one CLI invocation or embedding host.

Sources, highest priority first: keyword arguments (CLI flags), then
``BLACKMAMBA_*`` environment variables, then ``blackmamba.toml``, then the
defaults in :mod:`blackmamba.config.models`.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from blackmamba.config.discovery import locate_project
from blackmamba.config.models import DirectoriesConfig, FallbackConfig, PluginsConfig

# TOML file for the settings object currently being constructed.
_toml_file: ContextVar[Path | None] = ContextVar("_toml_file", default=None)


class BmSettings(BaseSettings):
    """Settings for the blackmamba CLI and runtime.

    Attributes:
        project_root: Directory relative paths are anchored at.
        config_path: The TOML file actually read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BLACKMAMBA_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    directories: DirectoriesConfig = Field(default_factory=DirectoriesConfig)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> BmSettings:
        """Settings for a CLI run, with *cli_flags* overriding everything else.

        Raises:
            click.ClickException: The config file is not valid TOML.
        """
        location = locate_project(
            start=project_root,
            config_path=Path(config_path) if config_path else None,
        )
        token = _toml_file.set(location.config_path)
        try:
            return cls(
                project_root=location.root,
                config_path=location.config_path,
                **cli_flags,
            )
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {location.config_path}: {exc}") from exc
        finally:
            _toml_file.reset(token)

    def _anchored(self, value: str) -> Path:
        p = Path(value)
        return p if p.is_absolute() else self.project_root / p

    @property
    def runtime_root(self) -> Path:
        """``directories.root`` anchored at the project root.

        An empty value means the project root itself.
        """
        if not self.directories.root:
            return self.project_root
        return self._anchored(self.directories.root)

    @property
    def plugins_dir(self) -> Path:
        """Local plugin directory anchored at the project root."""
        return self._anchored(self.plugins.local_dir)
