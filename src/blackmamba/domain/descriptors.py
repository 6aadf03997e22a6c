"""Package descriptor models — the persisted JSON form of a package.

A descriptor is a tagged variant: it either names a ``source`` file that
exports a factory (:class:`SourceDescriptor`) or points at the builder of
another package (:class:`BuilderRefDescriptor`). Dependency specs are
normalized here so the resolver only ever sees explicit ids and names.

INVARIANT: descriptors are read-only once parsed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypeAlias, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from blackmamba.domain.errors import DescriptorError


class PackageDependency(BaseModel):
    """A reference to another package, bound under ``name``."""

    model_config = {"frozen": True}

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    build: bool = True


class SourceDependency(BaseModel):
    """A reference to a plain source file, bound under ``name`` or ``method``."""

    model_config = {"frozen": True}

    id: str = Field(min_length=1)
    name: str | None = None
    method: str | None = None

    @property
    def binding(self) -> str:
        """Name the export is injected under; ``name`` wins over ``method``."""
        return self.name or self.method or self.id


class Dependencies(BaseModel):
    """[dependencies] block of a descriptor."""

    model_config = {"frozen": True}

    packages: list[PackageDependency] = Field(default_factory=list)
    sources: list[SourceDependency] = Field(default_factory=list)


class _DescriptorBase(BaseModel):
    model_config = {"frozen": True, "extra": "ignore", "populate_by_name": True}

    name: str
    factory_settings: Any = Field(default_factory=dict, alias="factorySettings")


class SourceDescriptor(_DescriptorBase):
    """Package built from a factory exported by a source file."""

    kind: Literal["source"] = "source"
    source: str = Field(min_length=1)
    dependencies: Dependencies = Field(default_factory=Dependencies)


class BuilderRefDescriptor(_DescriptorBase):
    """Package built from another package's builder with its own settings."""

    kind: Literal["builder"] = "builder"
    builder: str = Field(min_length=1)


PackageDescriptor: TypeAlias = SourceDescriptor | BuilderRefDescriptor


# --- Parsing ---


def parse_descriptor(package_id: str, data: Any) -> PackageDescriptor:
    """Validate raw descriptor JSON for *package_id* into a tagged descriptor.

    Raises:
        DescriptorError: on any shape problem, including a descriptor with
            neither (or both) of ``source`` and ``builder``.
    """
    if not isinstance(data, Mapping):
        raise DescriptorError(
            f"package {package_id} descriptor must be a JSON object, got {type(data).__name__}",
            package_id=package_id,
        )

    has_source = bool(data.get("source"))
    has_builder = bool(data.get("builder"))
    if has_source and has_builder:
        raise DescriptorError(
            f"package {package_id} declares both source and builder",
            package_id=package_id,
        )
    if not has_source and not has_builder:
        raise DescriptorError(
            f"package {package_id} has no source or builder",
            package_id=package_id,
        )

    fields = {k: v for k, v in data.items() if k not in ("kind", "dependencies")}
    try:
        if has_builder:
            return BuilderRefDescriptor.model_validate(fields)
        dependencies = parse_dependencies(package_id, data.get("dependencies"))
        return SourceDescriptor.model_validate({**fields, "dependencies": dependencies})
    except PydanticValidationError as exc:
        raise DescriptorError(
            f"package {package_id} descriptor is invalid: {exc}",
            package_id=package_id,
        ) from exc


def parse_dependencies(package_id: str, raw: Any) -> Dependencies:
    """Normalize the ``dependencies`` block of *package_id*."""
    if raw is None:
        return Dependencies()
    if not isinstance(raw, Mapping):
        raise DescriptorError(
            f"package {package_id}: dependencies must be an object",
            package_id=package_id,
        )

    packages = _as_list(package_id, raw, "packages")
    sources = _as_list(package_id, raw, "sources")
    return Dependencies(
        packages=[package_dependency(package_id, spec) for spec in packages],
        sources=[source_dependency(package_id, spec) for spec in sources],
    )


def package_dependency(package_id: str, spec: Any) -> PackageDependency:
    """Normalize one entry of ``dependencies.packages``.

    A bare string is both id and binding name. An object needs ``pkg``
    and ``name``; ``build`` defaults to True.
    """
    if isinstance(spec, str):
        return _model(package_id, spec, PackageDependency, id=spec, name=spec)
    if not isinstance(spec, Mapping):
        raise DescriptorError(
            f"package {package_id}: package dependency must be a string or object, got {spec!r}",
            package_id=package_id,
        )

    dep_id = spec.get("pkg")
    if not dep_id:
        raise DescriptorError(
            f'package {package_id}: package dependency {dict(spec)!r} has no "pkg"',
            package_id=package_id,
        )
    name = spec.get("name")
    if name is None:
        raise DescriptorError(
            f'Package error for {package_id}: "name" is not defined for dependency {dep_id}',
            package_id=package_id,
            dependency_id=str(dep_id),
        )
    return _model(
        package_id,
        dep_id,
        PackageDependency,
        id=dep_id,
        name=name,
        build=spec.get("build", True),
    )


def source_dependency(package_id: str, spec: Any) -> SourceDependency:
    """Normalize one entry of ``dependencies.sources``.

    A bare string is both id and binding name. An object needs ``source``
    plus ``name`` or ``method``; the binding name falls back to ``method``.
    """
    if isinstance(spec, str):
        return _model(package_id, spec, SourceDependency, id=spec, name=spec)
    if not isinstance(spec, Mapping):
        raise DescriptorError(
            f"package {package_id}: source dependency must be a string or object, got {spec!r}",
            package_id=package_id,
        )

    dep_id = spec.get("source")
    if not dep_id:
        raise DescriptorError(
            f'package {package_id}: source dependency {dict(spec)!r} has no "source"',
            package_id=package_id,
        )
    name = spec.get("name")
    method = spec.get("method")
    if not name and not method:
        raise DescriptorError(
            f'Package error for {package_id}: "name" is not defined for dependency {dep_id}',
            package_id=package_id,
            dependency_id=str(dep_id),
        )
    return _model(package_id, dep_id, SourceDependency, id=dep_id, name=name, method=method)


def _as_list(package_id: str, raw: Mapping[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DescriptorError(
            f"package {package_id}: dependencies.{key} must be a list",
            package_id=package_id,
        )
    return value


M = TypeVar("M", bound=BaseModel)


def _model(package_id: str, dep_id: Any, model: type[M], **fields: Any) -> M:
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        raise DescriptorError(
            f"package {package_id}: invalid dependency {dep_id!r}: {exc}",
            package_id=package_id,
            dependency_id=str(dep_id),
        ) from exc
