"""Tests for the batch query driver."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

import pytest

from dpkgsize.domain.records import MissingInstalledSizeError, PackageRecord, parse_status
from dpkgsize.services.catalog import Catalog, batched, build_catalog


def _source_with(fake_source: type, stanza: Callable[..., str], count: int) -> Any:
    return fake_source({f"pkg{i:03d}": stanza(f"pkg{i:03d}", i) for i in range(count)})


class TestBatched:
    def test_exact_multiple(self) -> None:
        assert batched(["a", "b", "c", "d"], 2) == [["a", "b"], ["c", "d"]]

    def test_remainder(self) -> None:
        assert batched(["a", "b", "c"], 2) == [["a", "b"], ["c"]]

    def test_empty(self) -> None:
        assert batched([], 100) == []

    def test_duplicates_dropped_keeping_order(self) -> None:
        assert batched(["b", "a", "b", "c", "a"], 10) == [["b", "a", "c"]]

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_size(self, size: int) -> None:
        with pytest.raises(ValueError, match="batch size"):
            batched(["a"], size)


class TestBuildCatalog:
    @pytest.mark.parametrize(("count", "size"), [(1, 100), (100, 100), (101, 100), (250, 7)])
    def test_issues_ceil_n_over_b_queries(
        self, fake_source: type, stanza: Callable[..., str], count: int, size: int
    ) -> None:
        source = _source_with(fake_source, stanza, count)
        catalog = build_catalog(source.list_installed(), source.status, batch_size=size)
        assert len(source.status_calls) == math.ceil(count / size)
        assert all(len(call) <= size for call in source.status_calls)
        assert len(catalog) == count

    def test_batched_union_equals_single_batch(
        self, fake_source: type, stanza: Callable[..., str]
    ) -> None:
        source = _source_with(fake_source, stanza, 23)
        names = source.list_installed()

        batched_catalog = build_catalog(names, source.status, batch_size=4)
        single = parse_status(source.status(names))

        assert set(batched_catalog.values()) == set(single)

    def test_default_batch_size_is_100(self, fake_source: type, stanza: Callable[..., str]) -> None:
        source = _source_with(fake_source, stanza, 201)
        build_catalog(source.list_installed(), source.status)
        assert [len(call) for call in source.status_calls] == [100, 100, 1]

    def test_no_names_no_queries(self, fake_source: type) -> None:
        source = fake_source({})
        catalog = build_catalog([], source.status)
        assert len(catalog) == 0
        assert source.status_calls == []

    def test_unknown_names_are_absent(self, fake_source: type, stanza: Callable[..., str]) -> None:
        source = fake_source({"real": stanza("real", 3)}, installed=["real", "vanished"])
        catalog = build_catalog(source.list_installed(), source.status)
        assert set(catalog) == {"real"}

    def test_arch_qualified_names(self, fake_source: type, stanza: Callable[..., str]) -> None:
        """dpkg lists multi-arch names as ``name:arch`` but stanzas say ``name``."""

        def status(names: list[str]) -> list[str]:
            return stanza("libc6", 12).splitlines()

        catalog = build_catalog(["libc6:amd64"], status)
        assert catalog["libc6"].installed_size == 12

    def test_duplicate_stanza_first_wins(self, stanza: Callable[..., str]) -> None:
        outputs = {
            "a": stanza("dup", 1).splitlines(),
            "b": stanza("dup", 2).splitlines(),
        }
        catalog = build_catalog(["a", "b"], lambda names: outputs[names[0]], batch_size=1)
        assert catalog["dup"].installed_size == 1

    @pytest.mark.parametrize(("first", "second"), [(12000, 13000), (13000, 12000)])
    def test_same_batch_multiarch_stanzas_keep_printed_order(
        self, stanza: Callable[..., str], first: int, second: int
    ) -> None:
        text = stanza("libc6", first) + "\n\n" + stanza("libc6", second)
        catalog = build_catalog(["libc6:amd64", "libc6:i386"], lambda _names: text.splitlines())
        assert catalog["libc6"].installed_size == first

    def test_dropped_duplicate_is_a_warning(
        self, stanza: Callable[..., str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        events: list[tuple[str, dict[str, Any]]] = []

        class _Recorder:
            def warning(self, event: str, **fields: Any) -> None:
                events.append((event, fields))

            def debug(self, event: str, **fields: Any) -> None:
                pass

        monkeypatch.setattr("dpkgsize.services.catalog.logger", _Recorder())
        text = stanza("libc6", 12000) + "\n\n" + stanza("libc6", 13000)
        build_catalog(["libc6:amd64", "libc6:i386"], lambda _names: text.splitlines())
        assert events == [
            ("duplicate_stanza", {"package": "libc6", "kept_size": 12000, "dropped_size": 13000})
        ]

    def test_missing_size_propagates(self, fake_source: type, stanza: Callable[..., str]) -> None:
        source = fake_source({"ok": stanza("ok", 1), "bad": stanza("bad", None)})
        with pytest.raises(MissingInstalledSizeError, match="bad"):
            build_catalog(source.list_installed(), source.status)

    def test_parallel_workers_match_sequential(
        self, fake_source: type, stanza: Callable[..., str]
    ) -> None:
        source = _source_with(fake_source, stanza, 57)
        names = source.list_installed()
        sequential = build_catalog(names, source.status, batch_size=5)
        parallel = build_catalog(names, source.status, batch_size=5, workers=4)
        assert dict(parallel) == dict(sequential)
        assert list(parallel) == list(sequential)


class TestCatalog:
    def test_mapping_and_total(self) -> None:
        catalog = Catalog([PackageRecord("a", 3), PackageRecord("b", 4)])
        assert catalog["a"].installed_size == 3
        assert set(catalog) == {"a", "b"}
        assert catalog.total_size == 7

    def test_first_record_wins(self) -> None:
        catalog = Catalog([PackageRecord("a", 3), PackageRecord("a", 9)])
        assert catalog["a"].installed_size == 3
