"""Step timings for ``--verbose`` runs.

A run is a tree of timed steps: the service operation at the root, then
listing, the status query batches, graph building and aggregation below
it. Each step may carry counts (packages listed, batches issued, nodes
and edges built). With timings off, :func:`step` yields None and
:func:`traced` calls straight through.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from dpkgsize.services.result import ServiceResult

logger = structlog.get_logger(__name__)

_timing_on: ContextVar[bool] = ContextVar("dpkgsize_timing_on", default=False)
_open_step: ContextVar[Step | None] = ContextVar("dpkgsize_open_step", default=None)


@dataclass
class Step:
    name: str
    started: float = field(default_factory=time.perf_counter)
    elapsed_ms: float | None = None
    counts: dict[str, int] = field(default_factory=dict)
    steps: list[Step] = field(default_factory=list)

    def close(self) -> None:
        self.elapsed_ms = (time.perf_counter() - self.started) * 1000

    def count(self, key: str, value: int) -> None:
        self.counts[key] = value

    def as_tree(self) -> dict[str, Any]:
        """JSON-ready form; open steps report 0 ms."""
        tree: dict[str, Any] = {"name": self.name, "ms": round(self.elapsed_ms or 0.0, 2)}
        if self.counts:
            tree["counts"] = dict(self.counts)
        if self.steps:
            tree["steps"] = [s.as_tree() for s in self.steps]
        return tree


@contextmanager
def step(name: str) -> Iterator[Step | None]:
    """Time *name* as a child of the open step, if timings are being collected."""
    parent = _open_step.get() if _timing_on.get() else None
    if parent is None:
        yield None
        return

    current = Step(name)
    parent.steps.append(current)
    token = _open_step.set(current)
    try:
        yield current
    finally:
        current.close()
        _open_step.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Root a step tree at a service method; stored in ``meta["timings"]``."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _timing_on.get():
            return func(*args, **kwargs)

        root = Step(func.__qualname__)
        token = _open_step.set(root)
        try:
            result = func(*args, **kwargs)
        finally:
            root.close()
            _open_step.reset(token)

        logger.debug("timings", op=root.name, ms=round(root.elapsed_ms or 0.0, 2))
        if isinstance(result, ServiceResult):
            meta = dict(result.meta or {})
            meta["timings"] = root.as_tree()
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper


def set_timing(enabled: bool) -> None:
    """Switch step collection on or off for the current context."""
    _timing_on.set(enabled)
