"""Domain probe for the scoped data handle cache."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HandleCacheProbe(Protocol):
    """Domain probe for scoped data handle cache operations."""

    def handle_cache_hit(self, tenant_id: str) -> None:
        """Record that a cached handle was reused."""
        ...

    def handle_construction_joined(self, tenant_id: str) -> None:
        """Record that a caller waited on another caller's construction."""
        ...

    def handle_constructed(self, tenant_id: str, database: str) -> None:
        """Record that a new handle was built and cached."""
        ...

    def handle_construction_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that the storage backend failed to build a handle."""
        ...

    def stale_handle_discarded(self, tenant_id: str) -> None:
        """Record that a handle finished building after its tenant was invalidated."""
        ...

    def handle_invalidated(self, tenant_id: str, existed: bool) -> None:
        """Record that a tenant's handle was removed from the cache."""
        ...

    def handles_closed(self, count: int) -> None:
        """Record that every cached handle was released."""
        ...

    def with_context(self, context: ObservationContext) -> HandleCacheProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultHandleCacheProbe:
    """Default implementation of HandleCacheProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultHandleCacheProbe:
        """Create a new probe with observation context bound."""
        return DefaultHandleCacheProbe(logger=self._logger, context=context)

    def handle_cache_hit(self, tenant_id: str) -> None:
        self._logger.debug(
            "scoped_handle_cache_hit",
            handle_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def handle_construction_joined(self, tenant_id: str) -> None:
        self._logger.debug(
            "scoped_handle_construction_joined",
            handle_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def handle_constructed(self, tenant_id: str, database: str) -> None:
        self._logger.info(
            "scoped_handle_constructed",
            handle_tenant=tenant_id,
            database=database,
            **self._get_context_kwargs(),
        )

    def handle_construction_failed(self, tenant_id: str, error: Exception) -> None:
        self._logger.error(
            "scoped_handle_construction_failed",
            handle_tenant=tenant_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def stale_handle_discarded(self, tenant_id: str) -> None:
        self._logger.info(
            "scoped_handle_stale_discarded",
            handle_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def handle_invalidated(self, tenant_id: str, existed: bool) -> None:
        self._logger.info(
            "scoped_handle_invalidated",
            handle_tenant=tenant_id,
            existed=existed,
            **self._get_context_kwargs(),
        )

    def handles_closed(self, count: int) -> None:
        self._logger.info(
            "scoped_handles_closed",
            count=count,
            **self._get_context_kwargs(),
        )
