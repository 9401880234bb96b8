"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, dpkgsize.toml only holds
overrides. No file is needed for a plain run.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class QueryConfig(BaseModel):
    """[query] section."""

    model_config = {"frozen": True}

    dpkg_query: str = "dpkg-query"
    batch_size: int = Field(default=100, ge=1)
    workers: int = Field(default=1, ge=1)


class ReportConfig(BaseModel):
    """[report] section."""

    model_config = {"frozen": True}

    sort: Literal["own", "deps"] = "own"
    top: int | None = Field(default=None, ge=1)

