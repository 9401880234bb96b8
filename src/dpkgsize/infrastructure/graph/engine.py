"""PackageGraph — NetworkX dependency graph and transitive sizes.

Built once per invocation from the catalog, in two passes: every package
becomes a node first, then every declared dependency is resolved to a node
and added as an edge. The graph is frozen afterwards, so transitive sizes
are only ever computed over a finished graph.

Dependency data is not guaranteed acyclic. Aggregation is a breadth-first
walk with a visited set; there is no topological ordering anywhere.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias

import networkx as nx
import structlog

from dpkgsize.domain.aliases import AliasIndex
from dpkgsize.domain.records import PackageRecord

logger = structlog.get_logger(__name__)

_Graph: TypeAlias = nx.DiGraph


@dataclass(frozen=True)
class UnresolvedDependency:
    """A declared dependency that matched no installed package or alias."""

    package: str
    dependency: str


def resolve_dependency(name: str, nodes: Mapping[str, object], aliases: AliasIndex) -> str | None:
    """Return the node a dependency on *name* refers to, or None.

    Exact package names win. Otherwise the first provider of *name* that is
    itself an installed package is used.
    """
    if name in nodes:
        return name
    for provider in aliases.providers(name):
        if provider in nodes:
            return provider
    return None


class PackageGraph:
    """Read-only dependency graph keyed by package name.

    Nodes carry an ``own_size`` attribute. An edge ``a -> b`` means package
    ``a`` requires ``b``.
    """

    def __init__(
        self,
        graph: _Graph,
        unresolved: tuple[UnresolvedDependency, ...] = (),
    ) -> None:
        self._graph = graph if nx.is_frozen(graph) else nx.freeze(graph)
        self.unresolved = unresolved
        self._transitive: dict[str, int] = {}

    @classmethod
    def build(
        cls,
        catalog: Mapping[str, PackageRecord],
        aliases: AliasIndex | None = None,
    ) -> PackageGraph:
        """Build the graph for *catalog*.

        Unresolved dependencies are logged as warnings and dropped; they
        never abort the build. A package resolving to itself gets no edge.
        """
        if aliases is None:
            aliases = AliasIndex.from_records(catalog.values())

        g: _Graph = nx.DiGraph()
        for name, record in catalog.items():
            g.add_node(name, own_size=record.installed_size)

        unresolved: list[UnresolvedDependency] = []
        for name, record in catalog.items():
            for dependency in sorted(record.depends):
                target = resolve_dependency(dependency, catalog, aliases)
                if target is None:
                    logger.warning("unresolved_dependency", package=name, dependency=dependency)
                    unresolved.append(UnresolvedDependency(package=name, dependency=dependency))
                elif target != name:
                    g.add_edge(name, target)

        return cls(g, tuple(unresolved))

    @property
    def graph(self) -> _Graph:
        return self._graph

    def __contains__(self, name: object) -> bool:
        return name in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def names(self) -> list[str]:
        return list(self._graph.nodes)

    def own_size(self, name: str) -> int:
        return int(self._graph.nodes[name]["own_size"])

    def dependencies(self, name: str) -> list[str]:
        """Directly required packages of *name*."""
        return sorted(self._graph.successors(name))

    def reachable(self, name: str) -> set[str]:
        """All packages reachable from *name*, including *name* itself.

        Raises:
            KeyError: *name* is not a node.
        """
        if name not in self._graph:
            raise KeyError(name)
        visited = {name}
        queue = deque([name])
        while queue:
            current = queue.popleft()
            for dependency in self._graph.successors(current):
                if dependency not in visited:
                    visited.add(dependency)
                    queue.append(dependency)
        return visited

    def transitive_size(self, name: str) -> int:
        """Own size of *name* plus every reachable dependency, each once."""
        if name not in self._transitive:
            self._transitive[name] = sum(self.own_size(node) for node in self.reachable(name))
        return self._transitive[name]

    def transitive_sizes(self) -> dict[str, int]:
        return {name: self.transitive_size(name) for name in self._graph.nodes}

    @property
    def total_size(self) -> int:
        return sum(self.own_size(name) for name in self._graph.nodes)
