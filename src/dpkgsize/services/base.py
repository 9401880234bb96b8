"""BaseService — shared foundation for dpkgsize services.

Every service receives a :class:`PackageSource` (dpkg-query in production,
an in-memory fake in tests) plus the ``[query]`` configuration that
controls batching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dpkgsize.config.models import QueryConfig
from dpkgsize.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from dpkgsize.infrastructure.dpkg import PackageSource

logger = structlog.get_logger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class InventoryService(BaseService):
            def report(self) -> ServiceResult:
                catalog = build_catalog(self._source.list_installed(), ...)
                ...
    """

    def __init__(self, source: PackageSource, config: QueryConfig | None = None) -> None:
        self._source = source
        self._config = config or QueryConfig()

    @staticmethod
    def _failure(op: str, code: ErrorCode, exc: Exception) -> ServiceResult:
        """Turn a fatal pipeline exception into an error result."""
        logger.debug("operation_failed", op=op, code=code, error=str(exc))
        return ServiceResult.failure(op, code, str(exc), exception=type(exc).__name__)
