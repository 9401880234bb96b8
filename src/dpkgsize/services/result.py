"""What every inventory operation returns.

A run either produces a report (``ok=True``, possibly with unresolved
dependency warnings) or stops before printing anything (``ok=False`` with
one of the :data:`ErrorCode` values).
"""

from __future__ import annotations

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, Field

# DATA_INTEGRITY: a status stanza is malformed (e.g. no Installed-Size)
# QUERY_FAILED: dpkg-query could not be run
# NOT_FOUND: the requested package is not installed
ErrorCode: TypeAlias = Literal["DATA_INTEGRITY", "QUERY_FAILED", "NOT_FOUND"]


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of ``report``, ``show`` or ``unresolved``.

    Attributes:
        ok: False when the run stopped on a fatal error.
        op: Operation name, used to pick a renderer.
        data: Operation payload; report rows live under ``items``.
        warnings: Non-fatal issues, such as unresolved dependencies.
        error: Set when ``ok`` is False.
        meta: Step timings under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
