"""Domain probe for tenant directory operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to tenant directory persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantDirectoryProbe(Protocol):
    """Domain probe for tenant directory operations."""

    def tenant_saved(self, tenant_id: str) -> None:
        """Record that a tenant record was written."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant record was read."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that no tenant record matched."""
        ...

    def duplicate_tenant_identifier(self, tenant_id: str) -> None:
        """Record that an insert collided with an existing identifier."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that all tenants were listed."""
        ...

    def with_context(self, context: ObservationContext) -> TenantDirectoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantDirectoryProbe:
    """Default implementation of TenantDirectoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantDirectoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantDirectoryProbe(logger=self._logger, context=context)

    def tenant_saved(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_directory_saved",
            directory_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_directory_retrieved",
            directory_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_directory_not_found",
            directory_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_identifier(self, tenant_id: str) -> None:
        self._logger.warning(
            "tenant_directory_duplicate_identifier",
            directory_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        self._logger.debug(
            "tenant_directory_listed",
            count=count,
            **self._get_context_kwargs(),
        )
