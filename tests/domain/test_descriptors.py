"""Tests for descriptor parsing and dependency normalization."""

from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from blackmamba.domain.descriptors import (
    BuilderRefDescriptor,
    PackageDependency,
    SourceDependency,
    SourceDescriptor,
    package_dependency,
    parse_dependencies,
    parse_descriptor,
    source_dependency,
)
from blackmamba.domain.errors import DescriptorError

# ---------------------------------------------------------------------------
# parse_descriptor
# ---------------------------------------------------------------------------


class TestParseDescriptor:
    def test_source_descriptor(self) -> None:
        descriptor = parse_descriptor("greeter", {"name": "greeter", "source": "greeter.py"})
        assert isinstance(descriptor, SourceDescriptor)
        assert descriptor.kind == "source"
        assert descriptor.source == "greeter.py"
        assert descriptor.factory_settings == {}
        assert descriptor.dependencies.packages == []
        assert descriptor.dependencies.sources == []

    def test_builder_descriptor(self) -> None:
        descriptor = parse_descriptor(
            "loud",
            {"name": "loud", "builder": "shout", "factorySettings": {"volume": 11}},
        )
        assert isinstance(descriptor, BuilderRefDescriptor)
        assert descriptor.builder == "shout"
        assert descriptor.factory_settings == {"volume": 11}

    def test_factory_settings_any_json(self) -> None:
        descriptor = parse_descriptor(
            "x", {"name": "x", "source": "x.py", "factorySettings": "plain"}
        )
        assert descriptor.factory_settings == "plain"

    def test_unknown_keys_ignored(self) -> None:
        descriptor = parse_descriptor(
            "x", {"name": "x", "source": "x.py", "kind": "builder", "comment": "hi"}
        )
        assert isinstance(descriptor, SourceDescriptor)

    def test_descriptor_is_frozen(self) -> None:
        descriptor = parse_descriptor("x", {"name": "x", "source": "x.py"})
        with pytest.raises(PydanticValidationError):
            descriptor.source = "y.py"  # type: ignore[misc]

    def test_neither_source_nor_builder(self) -> None:
        with pytest.raises(DescriptorError, match="package empty has no source or builder"):
            parse_descriptor("empty", {"name": "empty"})

    def test_both_source_and_builder(self) -> None:
        with pytest.raises(DescriptorError, match="both source and builder"):
            parse_descriptor("x", {"name": "x", "source": "x.py", "builder": "y"})

    @pytest.mark.parametrize("data", [None, [], "greeter", 42])
    def test_non_object_rejected(self, data: Any) -> None:
        with pytest.raises(DescriptorError, match="must be a JSON object"):
            parse_descriptor("x", data)

    def test_missing_name_rejected(self) -> None:
        with pytest.raises(DescriptorError, match="descriptor is invalid") as exc_info:
            parse_descriptor("x", {"source": "x.py"})
        assert exc_info.value.package_id == "x"


# ---------------------------------------------------------------------------
# Dependency specs
# ---------------------------------------------------------------------------


class TestPackageDependency:
    def test_string_spec(self) -> None:
        dep = package_dependency("app", "logger")
        assert dep == PackageDependency(id="logger", name="logger", build=True)

    def test_object_spec(self) -> None:
        dep = package_dependency("app", {"pkg": "logger", "name": "log"})
        assert dep.id == "logger"
        assert dep.name == "log"
        assert dep.build is True

    def test_object_spec_build_false(self) -> None:
        dep = package_dependency("app", {"pkg": "logger", "name": "log", "build": False})
        assert dep.build is False

    def test_missing_name(self) -> None:
        with pytest.raises(DescriptorError) as exc_info:
            package_dependency("app", {"pkg": "logger"})
        assert str(exc_info.value) == (
            'Package error for app: "name" is not defined for dependency logger'
        )
        assert exc_info.value.detail() == {"package": "app", "dependency": "logger"}

    def test_missing_pkg(self) -> None:
        with pytest.raises(DescriptorError, match='has no "pkg"'):
            package_dependency("app", {"name": "log"})

    def test_invalid_build_flag(self) -> None:
        with pytest.raises(DescriptorError, match="invalid dependency"):
            package_dependency("app", {"pkg": "logger", "name": "log", "build": "maybe"})

    def test_wrong_type(self) -> None:
        with pytest.raises(DescriptorError, match="must be a string or object"):
            package_dependency("app", 3)


class TestSourceDependency:
    def test_string_spec(self) -> None:
        dep = source_dependency("app", "utils.py")
        assert dep.id == "utils.py"
        assert dep.binding == "utils.py"
        assert dep.method is None

    def test_method_is_binding_when_no_name(self) -> None:
        dep = source_dependency("app", {"source": "utils.py", "method": "slugify"})
        assert dep.binding == "slugify"

    def test_name_wins_over_method(self) -> None:
        dep = source_dependency("app", {"source": "utils.py", "name": "slug", "method": "slugify"})
        assert dep.binding == "slug"
        assert dep.method == "slugify"

    def test_missing_name_and_method(self) -> None:
        with pytest.raises(DescriptorError, match='"name" is not defined for dependency utils.py'):
            source_dependency("app", {"source": "utils.py"})

    def test_missing_source(self) -> None:
        with pytest.raises(DescriptorError, match='has no "source"'):
            source_dependency("app", {"name": "utils"})

    def test_model_binding_falls_back_to_id(self) -> None:
        assert SourceDependency(id="utils.py").binding == "utils.py"


class TestParseDependencies:
    def test_none_is_empty(self) -> None:
        deps = parse_dependencies("app", None)
        assert deps.packages == []
        assert deps.sources == []

    def test_mixed_specs(self) -> None:
        deps = parse_dependencies(
            "app",
            {
                "packages": ["logger", {"pkg": "db", "name": "store", "build": False}],
                "sources": [{"source": "utils.py", "method": "slugify"}],
            },
        )
        assert [(d.id, d.name, d.build) for d in deps.packages] == [
            ("logger", "logger", True),
            ("db", "store", False),
        ]
        assert [d.binding for d in deps.sources] == ["slugify"]

    def test_non_object_block(self) -> None:
        with pytest.raises(DescriptorError, match="dependencies must be an object"):
            parse_dependencies("app", ["logger"])

    def test_non_list_packages(self) -> None:
        with pytest.raises(DescriptorError, match="dependencies.packages must be a list"):
            parse_dependencies("app", {"packages": "logger"})

    def test_dependency_error_through_descriptor(self) -> None:
        with pytest.raises(DescriptorError, match="dependency logger"):
            parse_descriptor(
                "app",
                {
                    "name": "app",
                    "source": "app.py",
                    "dependencies": {"packages": [{"pkg": "logger"}]},
                },
            )
