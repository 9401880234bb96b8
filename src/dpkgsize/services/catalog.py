"""Batch query driver — installed names in, package catalog out.

dpkg-query takes package names as arguments, so the installed set is split
into fixed-size batches to stay under the command-line length limit. Each
batch is queried and parsed on its own; the catalog is the union of the
parsed records keyed by package name.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeAlias

import structlog

from dpkgsize.domain.records import PackageRecord, parse_status
from dpkgsize.services.telemetry import step

logger = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 100

StatusQuery: TypeAlias = Callable[[Sequence[str]], Iterable[str]]


class Catalog(Mapping[str, PackageRecord]):
    """Read-only ``name -> PackageRecord`` mapping for one run."""

    def __init__(self, records: Iterable[PackageRecord] = ()) -> None:
        self._records: dict[str, PackageRecord] = {}
        for record in records:
            self._records.setdefault(record.name, record)

    def __getitem__(self, name: str) -> PackageRecord:
        return self._records[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def total_size(self) -> int:
        """Sum of installed sizes over every record."""
        return sum(record.installed_size for record in self._records.values())


def batched(names: Iterable[str], size: int) -> list[list[str]]:
    """Split *names* into consecutive batches of at most *size* names.

    Duplicates are dropped, keeping first-occurrence order.
    """
    if size < 1:
        msg = f"batch size must be at least 1, got {size}"
        raise ValueError(msg)
    unique = list(dict.fromkeys(names))
    return [unique[i : i + size] for i in range(0, len(unique), size)]


def _query_batch(query: StatusQuery, batch: Sequence[str]) -> list[PackageRecord]:
    return parse_status(query(batch))


def build_catalog(
    names: Iterable[str],
    query: StatusQuery,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    workers: int = 1,
) -> Catalog:
    """Query and parse every installed package, batch by batch.

    Args:
        names: Installed package names from the package lister.
        query: Runs the status query for one batch and returns its lines.
        batch_size: Maximum names per status query.
        workers: Batches queried in parallel. Merging always happens on the
            calling thread, in batch order.

    Raises:
        DataIntegrityError: A stanza in any batch is malformed.
    """
    batches = batched(names, batch_size)
    with step("query_batches") as timing:
        if timing:
            timing.count("batches", len(batches))
        if workers > 1 and len(batches) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(lambda b: _query_batch(query, b), batches))
        else:
            results = [_query_batch(query, batch) for batch in batches]

    records: dict[str, PackageRecord] = {}
    for batch, parsed in zip(batches, results, strict=True):
        for record in parsed:
            kept = records.setdefault(record.name, record)
            if kept is not record:
                logger.warning(
                    "duplicate_stanza",
                    package=record.name,
                    kept_size=kept.installed_size,
                    dropped_size=record.installed_size,
                )

        found = {record.name for record in parsed}
        for name in batch:
            if name.split(":", 1)[0] not in found and name not in found:
                logger.debug("package_not_reported", package=name)

    logger.debug("catalog_built", packages=len(records), batches=len(batches))
    return Catalog(records[name] for name in sorted(records))
