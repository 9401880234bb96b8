"""InventoryService — installed package footprint, with and without deps.

Runs the whole pipeline once per service instance:
list installed names -> batched status queries -> catalog -> alias index
-> dependency graph -> transitive sizes. Each public method turns the
result into a ServiceResult.

Fatal errors (a stanza without an installed size, dpkg-query not runnable)
become ``ok=False`` results before anything is reported. Unresolved
dependencies are warnings only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from dpkgsize.domain.aliases import AliasIndex
from dpkgsize.domain.records import DataIntegrityError
from dpkgsize.infrastructure.dpkg import PackageQueryError
from dpkgsize.infrastructure.graph.engine import PackageGraph
from dpkgsize.services.base import BaseService
from dpkgsize.services.catalog import build_catalog
from dpkgsize.services.result import ServiceResult
from dpkgsize.services.telemetry import step, traced

if TYPE_CHECKING:
    from dpkgsize.config.models import QueryConfig
    from dpkgsize.infrastructure.dpkg import PackageSource

SortKey: TypeAlias = Literal["own", "deps"]


def percent(size: int, total: int) -> float:
    """*size* as a percentage of *total*; 0.0 for an empty inventory."""
    if total <= 0:
        return 0.0
    return 100.0 * size / total


class InventoryService(BaseService):
    """Answers "what is using disk space, including dependencies"."""

    def __init__(self, source: PackageSource, config: QueryConfig | None = None) -> None:
        super().__init__(source, config)
        self._graph: PackageGraph | None = None

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def load_graph(self) -> PackageGraph:
        """Build (once) and return the dependency graph of installed packages.

        Raises:
            DataIntegrityError: A status stanza is malformed.
            PackageQueryError: dpkg-query cannot be run.
        """
        if self._graph is not None:
            return self._graph

        with step("list_installed") as timing:
            names = self._source.list_installed()
            if timing:
                timing.count("packages", len(names))

        catalog = build_catalog(
            names,
            self._source.status,
            batch_size=self._config.batch_size,
            workers=self._config.workers,
        )

        with step("build_graph") as timing:
            aliases = AliasIndex.from_records(catalog.values())
            graph = PackageGraph.build(catalog, aliases)
            if timing:
                timing.count("nodes", len(graph))
                timing.count("edges", graph.graph.number_of_edges())
                timing.count("aliases", len(aliases))
                timing.count("kib", catalog.total_size)

        self._graph = graph
        return graph

    def _load_or_fail(self, op: str) -> PackageGraph | ServiceResult:
        try:
            return self.load_graph()
        except DataIntegrityError as exc:
            return self._failure(op, "DATA_INTEGRITY", exc)
        except PackageQueryError as exc:
            return self._failure(op, "QUERY_FAILED", exc)

    @staticmethod
    def _unresolved_warnings(graph: PackageGraph) -> list[str]:
        count = len(graph.unresolved)
        if not count:
            return []
        noun = "dependency" if count == 1 else "dependencies"
        return [f"{count} unresolved {noun} ignored (see 'dpkgsize unresolved')"]

    # ------------------------------------------------------------------
    # report: every package, own size and size with dependencies
    # ------------------------------------------------------------------

    @traced
    def report(self, *, sort: SortKey = "own", top: int | None = None) -> ServiceResult:
        """Size report for every installed package, ascending.

        Args:
            sort: ``"own"`` orders by own size, ``"deps"`` by size with
                dependencies. Ties are broken by name.
            top: Keep only the *top* largest packages (still ascending).
        """
        loaded = self._load_or_fail("report")
        if isinstance(loaded, ServiceResult):
            return loaded
        graph = loaded

        total = graph.total_size
        with step("transitive_sizes"):
            transitive = graph.transitive_sizes()

        items: list[dict[str, Any]] = []
        for name in graph.names:
            own = graph.own_size(name)
            items.append(
                {
                    "name": name,
                    "own_size": own,
                    "own_percent": percent(own, total),
                    "transitive_size": transitive[name],
                    "transitive_percent": percent(transitive[name], total),
                    "dependency_count": len(graph.reachable(name)) - 1,
                }
            )

        size_key = "own_size" if sort == "own" else "transitive_size"
        items.sort(key=lambda item: (item[size_key], item["name"]))
        if top is not None:
            items = items[-top:] if top > 0 else []

        return ServiceResult(
            ok=True,
            op="report",
            data={
                "count": len(items),
                "total_packages": len(graph),
                "total_size": total,
                "sort": sort,
                "items": items,
            },
            warnings=self._unresolved_warnings(graph),
        )

    # ------------------------------------------------------------------
    # show: one package and everything it pulls in
    # ------------------------------------------------------------------

    @traced
    def show(self, name: str) -> ServiceResult:
        """Breakdown of one package: own size, deps, and each reachable package."""
        loaded = self._load_or_fail("show")
        if isinstance(loaded, ServiceResult):
            return loaded
        graph = loaded

        if name not in graph:
            return ServiceResult.failure("show", "NOT_FOUND", f"Package '{name}' is not installed")

        total = graph.total_size
        own = graph.own_size(name)
        transitive = graph.transitive_size(name)
        reachable = graph.reachable(name) - {name}
        items = [
            {
                "name": dep,
                "own_size": graph.own_size(dep),
                "own_percent": percent(graph.own_size(dep), total),
            }
            for dep in reachable
        ]
        items.sort(key=lambda item: (-item["own_size"], item["name"]))

        return ServiceResult(
            ok=True,
            op="show",
            data={
                "name": name,
                "own_size": own,
                "own_percent": percent(own, total),
                "transitive_size": transitive,
                "transitive_percent": percent(transitive, total),
                "depends": graph.dependencies(name),
                "unresolved": sorted(
                    u.dependency for u in graph.unresolved if u.package == name
                ),
                "count": len(items),
                "items": items,
            },
        )

    # ------------------------------------------------------------------
    # unresolved: dependencies that matched nothing installed
    # ------------------------------------------------------------------

    @traced
    def unresolved(self) -> ServiceResult:
        """List every declared dependency that resolved to no package."""
        loaded = self._load_or_fail("unresolved")
        if isinstance(loaded, ServiceResult):
            return loaded

        items = [
            {"package": u.package, "dependency": u.dependency}
            for u in sorted(loaded.unresolved, key=lambda u: (u.package, u.dependency))
        ]
        return ServiceResult(
            ok=True,
            op="unresolved",
            data={"count": len(items), "items": items},
        )
