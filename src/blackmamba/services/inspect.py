"""InspectService — read-only views of descriptors and dependency graphs.

Walks descriptors through the runtime's package loader only: sources are
never imported and nothing is built.
"""

from __future__ import annotations

from typing import Any

from blackmamba.domain.descriptors import (
    BuilderRefDescriptor,
    PackageDescriptor,
    SourceDescriptor,
    parse_descriptor,
)
from blackmamba.domain.errors import BlackMambaError
from blackmamba.infrastructure.graph import DependencyGraph
from blackmamba.services.base import BaseService
from blackmamba.services.result import ServiceError, ServiceResult

SOURCE_NODE_PREFIX = "source:"


class InspectService(BaseService):
    """Describes packages and their dependency graphs."""

    async def describe(self, package_id: str) -> ServiceResult:
        op = "describe"
        try:
            descriptor = await self._load(package_id)
        except BlackMambaError as exc:
            return ServiceResult.failure(op, exc)

        data: dict[str, Any] = {
            "id": package_id,
            "name": descriptor.name,
            "kind": descriptor.kind,
            "path": self._runtime.package_path(package_id),
            "factory_settings": descriptor.factory_settings,
        }
        if isinstance(descriptor, SourceDescriptor):
            data["source"] = descriptor.source
            data["packages"] = [dep.model_dump() for dep in descriptor.dependencies.packages]
            data["sources"] = [
                {**dep.model_dump(), "binding": dep.binding}
                for dep in descriptor.dependencies.sources
            ]
        else:
            data["builder"] = descriptor.builder
        return ServiceResult(ok=True, op=op, data=data)

    async def graph(self, package_id: str) -> ServiceResult:
        """Dependency graph of *package_id* with a dependencies-first build order."""
        op = "graph"
        graph = DependencyGraph()
        try:
            await self._walk(graph, package_id)
        except BlackMambaError as exc:
            return ServiceResult.failure(op, exc)

        cycles = graph.cycles()
        if cycles:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="DEPENDENCY_CYCLE",
                    message=f"{len(cycles)} dependency cycle(s) under {package_id}",
                    detail={"cycles": cycles},
                ),
            )

        order = [
            node
            for node in graph.build_order()
            if graph.graph.nodes[node].get("kind") == "package"
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": package_id,
                "build_order": order,
                "nodes": graph.nodes(),
                "edges": graph.edges(),
            },
        )

    # ------------------------------------------------------------------

    async def _load(self, package_id: str) -> PackageDescriptor:
        return parse_descriptor(package_id, await self._runtime.load_package(package_id))

    async def _walk(self, graph: DependencyGraph, package_id: str) -> None:
        if graph.has_node(package_id):
            return

        if self._runtime.has_module(package_id):
            graph.add_node(package_id, kind="package", system=True)
            return

        descriptor = await self._load(package_id)
        graph.add_node(package_id, kind="package", descriptor=descriptor.kind)

        if isinstance(descriptor, BuilderRefDescriptor):
            await self._walk(graph, descriptor.builder)
            graph.add_edge(package_id, descriptor.builder, kind="builder")
            return

        source_node = f"{SOURCE_NODE_PREFIX}{descriptor.source}"
        graph.add_node(source_node, kind="source")
        graph.add_edge(package_id, source_node, kind="factory")

        for dep in descriptor.dependencies.packages:
            await self._walk(graph, dep.id)
            graph.add_edge(package_id, dep.id, kind="package", name=dep.name, build=dep.build)

        for src in descriptor.dependencies.sources:
            node = f"{SOURCE_NODE_PREFIX}{src.id}"
            if not graph.has_node(node):
                graph.add_node(node, kind="source")
            graph.add_edge(package_id, node, kind="source", name=src.binding)
