"""Protocol for tenant application service observability.

Defines the interface for domain probes that capture application-level
domain events for tenant registration and status changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant application service operations."""

    def tenant_registered(self, tenant_id: str, database: str) -> None:
        """Record that a tenant was registered and its store provisioned."""
        ...

    def duplicate_tenant_identifier(self, tenant_id: str) -> None:
        """Record that registration hit an identifier already in use."""
        ...

    def provisioning_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that the tenant's store could not be created."""
        ...

    def tenant_status_changed(self, tenant_id: str, status: str) -> None:
        """Record that a tenant changed status and its handle was invalidated."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_registered(self, tenant_id: str, database: str) -> None:
        """Record that a tenant was registered and its store provisioned."""
        self._logger.info(
            "tenant_registered",
            registered_tenant=tenant_id,
            database=database,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant_identifier(self, tenant_id: str) -> None:
        """Record that registration hit an identifier already in use."""
        self._logger.warning(
            "tenant_identifier_duplicate",
            registered_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def provisioning_failed(self, tenant_id: str, error: Exception) -> None:
        """Record that the tenant's store could not be created."""
        self._logger.error(
            "tenant_provisioning_failed",
            registered_tenant=tenant_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def tenant_status_changed(self, tenant_id: str, status: str) -> None:
        """Record that a tenant changed status and its handle was invalidated."""
        self._logger.info(
            "tenant_status_changed",
            changed_tenant=tenant_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        self._logger.warning(
            "tenant_not_found",
            missing_tenant=tenant_id,
            **self._get_context_kwargs(),
        )
