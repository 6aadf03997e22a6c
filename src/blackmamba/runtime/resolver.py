"""Dependency resolution for source descriptors.

Package dependencies go back through ``register`` (depth-first, lazily,
memoized by the registry). Source dependencies bypass the descriptor
machinery and are imported directly.

INVARIANT: a failure on any dependency aborts the whole map; a partial
map is never returned.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from blackmamba.domain.errors import SourceImportError

if TYPE_CHECKING:
    from blackmamba.domain.descriptors import Dependencies, PackageDependency, SourceDependency
    from blackmamba.runtime.engine import BlackMamba

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Turns a descriptor's dependency block into a name -> implementation map."""

    def __init__(self, runtime: BlackMamba) -> None:
        self._runtime = runtime

    async def resolve(self, package_id: str, dependencies: Dependencies) -> dict[str, Any]:
        resolved: dict[str, Any] = {}

        for pkg in dependencies.packages:
            resolved[pkg.name] = await self._resolve_package(pkg)

        for src in dependencies.sources:
            resolved[src.binding] = await self._resolve_source(src)

        logger.debug("Resolved dependencies for %s: %s", package_id, sorted(resolved))
        return resolved

    async def _resolve_package(self, dep: PackageDependency) -> Any:
        registry = self._runtime.registry
        if dep.build and registry.has_module(dep.id):
            return registry.get_module(dep.id)
        return await self._runtime.register(dep.id, build=dep.build)

    async def _resolve_source(self, dep: SourceDependency) -> Any:
        source = await self._runtime.import_source(dep.id)
        if dep.method is None:
            return getattr(source, "default", source)
        try:
            return getattr(source, dep.method)
        except AttributeError as exc:
            raise SourceImportError(self._runtime.source_path(dep.id), exc) from exc
