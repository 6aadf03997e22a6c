"""Tests for config models — defaults and sparse overrides."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from blackmamba.config.models import DirectoriesConfig, FallbackConfig, PluginsConfig


class TestDirectoriesConfig:
    def test_defaults(self) -> None:
        cfg = DirectoriesConfig()
        assert cfg.root == ""
        assert cfg.sources == "./sources"
        assert cfg.packages == "./packages"

    def test_sparse_override(self) -> None:
        """Only override fields you care about — rest keeps defaults."""
        cfg = DirectoriesConfig(packages="./descriptors")
        assert cfg.packages == "./descriptors"
        assert cfg.sources == "./sources"

    def test_frozen(self) -> None:
        cfg = DirectoriesConfig()
        with pytest.raises(PydanticValidationError):
            cfg.root = "/srv"  # type: ignore[misc]


class TestFallbackConfig:
    def test_disabled_by_default(self) -> None:
        cfg = FallbackConfig()
        assert cfg.app is None
        assert cfg.cmd is None
        assert cfg.data is None

    def test_data_is_any_json(self) -> None:
        assert FallbackConfig(app="a", cmd="b", data=[1, {"x": 2}]).data == [1, {"x": 2}]


class TestPluginsConfig:
    def test_defaults(self) -> None:
        cfg = PluginsConfig()
        assert cfg.enabled is True
        assert cfg.local_dir == ".blackmamba/plugins"
