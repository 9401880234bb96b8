"""Alias index — virtual and superseded names mapped to real packages.

A dependency on ``mail-transport-agent`` is satisfied by whichever installed
package lists that name in ``Provides:`` (or ``Replaces:``). The graph
builder consults this index only when no package carries the exact name.

Provider order is catalog iteration order. Callers must treat it as
arbitrary: when several packages provide the same name, which one wins is
not part of the contract, only that it is stable for one catalog.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from dpkgsize.domain.records import PackageRecord


class AliasIndex(Mapping[str, tuple[str, ...]]):
    """Read-only mapping ``alias -> (real package names...)``."""

    def __init__(self, providers: Mapping[str, Iterable[str]] | None = None) -> None:
        self._providers: dict[str, tuple[str, ...]] = {
            alias: tuple(names) for alias, names in (providers or {}).items()
        }

    @classmethod
    def from_records(cls, records: Iterable[PackageRecord]) -> AliasIndex:
        """Index every ``replaces`` and ``provides`` entry of *records*."""
        providers: dict[str, list[str]] = {}
        for record in records:
            for alias in sorted(record.replaces | record.provides):
                names = providers.setdefault(alias, [])
                if record.name not in names:
                    names.append(record.name)
        return cls(providers)

    def providers(self, name: str) -> tuple[str, ...]:
        """Return the real package names offering *name* (empty if none)."""
        return self._providers.get(name, ())

    def __getitem__(self, name: str) -> tuple[str, ...]:
        return self._providers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
