"""Shared pytest fixtures for dpkgsize tests.

dpkg-query is never run: tests feed stanza text through an in-memory
:class:`FakeSource` that mimics ``dpkg-query --status`` output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

import pytest
import structlog
from click.testing import CliRunner

from dpkgsize.services.telemetry import set_timing


class FakeSource:
    """In-memory PackageSource.

    ``stanzas`` maps package name -> stanza text. ``installed`` defaults to
    every stanza name; names without a stanza behave like packages dpkg
    does not know (no output for them).
    """

    def __init__(self, stanzas: dict[str, str], installed: Iterable[str] | None = None) -> None:
        self.stanzas = stanzas
        self.installed = list(stanzas) if installed is None else list(installed)
        self.status_calls: list[list[str]] = []

    def list_installed(self) -> list[str]:
        return list(self.installed)

    def status(self, names: Sequence[str]) -> list[str]:
        self.status_calls.append(list(names))
        lines: list[str] = []
        for name in names:
            if name in self.stanzas:
                lines.extend(self.stanzas[name].splitlines())
                lines.append("")
        return lines


def make_stanza(
    name: str,
    size: int | None = 10,
    *,
    depends: str | None = None,
    provides: str | None = None,
    replaces: str | None = None,
) -> str:
    """Build a dpkg status stanza the way dpkg-query prints it."""
    lines = [f"Package: {name}", "Status: install ok installed", "Priority: optional"]
    if size is not None:
        lines.append(f"Installed-Size: {size}")
    lines.append("Architecture: amd64")
    if replaces is not None:
        lines.append(f"Replaces: {replaces}")
    if provides is not None:
        lines.append(f"Provides: {provides}")
    if depends is not None:
        lines.append(f"Depends: {depends}")
    lines.append(f"Description: the {name} package")
    return "\n".join(lines)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def stanza() -> Callable[..., str]:
    """The :func:`make_stanza` builder."""
    return make_stanza


@pytest.fixture
def fake_source() -> type[FakeSource]:
    """The :class:`FakeSource` class, for building per-test sources."""
    return FakeSource


@pytest.fixture
def sample_source() -> FakeSource:
    """A small inventory exercising aliases, cycles and a missing dependency.

    app -> libfoo, mta (virtual, provided by postfix), ghost (missing)
    libfoo -> libc; libbar <-> libbaz (cycle); libc -> libc (self)
    """
    return FakeSource(
        {
            "app": make_stanza("app", 100, depends="libfoo (>= 1.0), mta, ghost"),
            "libfoo": make_stanza("libfoo", 50, depends="libc6:amd64"),
            "libc6": make_stanza("libc6", 200, depends="libc6"),
            "postfix": make_stanza("postfix", 30, provides="mta", depends="libc6"),
            "libbar": make_stanza("libbar", 5, depends="libbaz"),
            "libbaz": make_stanza("libbaz", 15, depends="libbar"),
        }
    )


@pytest.fixture
def use_source(monkeypatch: pytest.MonkeyPatch) -> Callable[[FakeSource], FakeSource]:
    """Make the CLI use a fake source instead of dpkg-query."""

    def _install(source: FakeSource) -> FakeSource:
        monkeypatch.setattr(
            "dpkgsize.infrastructure.dpkg.DpkgQuery", lambda *_args, **_kwargs: source
        )
        return source

    return _install


@pytest.fixture(autouse=True)
def _reset_timing() -> Iterable[None]:
    yield
    set_timing(False)


@pytest.fixture(autouse=True)
def _no_config_discovery(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep a developer's dpkgsize.toml and DPKGSIZE_* env out of tests."""
    for var in ("DPKGSIZE_CONFIG", "DPKGSIZE_QUIET", "DPKGSIZE_VERBOSE", "DPKGSIZE_JSON_OUTPUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterable[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("dpkgsize")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)
    structlog.reset_defaults()
