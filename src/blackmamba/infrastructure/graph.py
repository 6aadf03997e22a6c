"""DependencyGraph — NetworkX view of a package dependency tree.

Nodes are package ids and source paths; an edge ``a -> b`` means "a needs
b to be built". Built fresh per inspection, never cached across runs.
"""

from __future__ import annotations

from typing import Any, TypeAlias

import networkx as nx

_Graph: TypeAlias = nx.DiGraph

NODE_KINDS = ("package", "source")
EDGE_KINDS = ("package", "builder", "source", "factory")


class DependencyGraph:
    """Directed dependency graph with build-order and cycle queries."""

    def __init__(self) -> None:
        self._graph: _Graph = nx.DiGraph()

    @property
    def graph(self) -> _Graph:
        return self._graph

    def add_node(self, node_id: str, *, kind: str, **attrs: Any) -> None:
        if kind not in NODE_KINDS:
            raise ValueError(f"unknown node kind {kind!r}")
        self._graph.add_node(node_id, kind=kind, **attrs)

    def add_edge(self, source: str, target: str, *, kind: str, **attrs: Any) -> None:
        if kind not in EDGE_KINDS:
            raise ValueError(f"unknown edge kind {kind!r}")
        self._graph.add_edge(source, target, kind=kind, **attrs)

    def has_node(self, node_id: str) -> bool:
        return self._graph.has_node(node_id)

    def nodes(self) -> list[dict[str, Any]]:
        return [{"id": n, **data} for n, data in self._graph.nodes(data=True)]

    def edges(self) -> list[dict[str, Any]]:
        return [
            {"source": u, "target": v, **data} for u, v, data in self._graph.edges(data=True)
        ]

    def cycles(self) -> list[list[str]]:
        """Elementary cycles, each as a list of node ids."""
        return [list(c) for c in nx.simple_cycles(self._graph)]

    def build_order(self) -> list[str]:
        """Node ids with every dependency ahead of its dependents.

        Raises:
            networkx.NetworkXUnfeasible: the graph has a cycle.
        """
        return list(reversed(list(nx.topological_sort(self._graph))))
