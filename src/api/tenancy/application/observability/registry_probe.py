"""Domain probe for the tenant registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantRegistryProbe(Protocol):
    """Domain probe for tenant registry operations."""

    def registry_hit(self, tenant_id: str) -> None:
        """Record that a tenant was served from the in-process registry."""
        ...

    def registry_refreshed(self, tenant_id: str, found: bool) -> None:
        """Record that a lookup miss was refreshed from the directory."""
        ...

    def tenant_registered(self, tenant_id: str) -> None:
        """Record that a tenant was added to the registry."""
        ...

    def tenant_evicted(self, tenant_id: str) -> None:
        """Record that a tenant was dropped from the registry."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRegistryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRegistryProbe:
    """Default implementation of TenantRegistryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantRegistryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRegistryProbe(logger=self._logger, context=context)

    def registry_hit(self, tenant_id: str) -> None:
        self._logger.debug(
            "tenant_registry_hit",
            registry_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def registry_refreshed(self, tenant_id: str, found: bool) -> None:
        self._logger.debug(
            "tenant_registry_refreshed",
            registry_tenant=tenant_id,
            found=found,
            **self._get_context_kwargs(),
        )

    def tenant_registered(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_registry_registered",
            registry_tenant=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_evicted(self, tenant_id: str) -> None:
        self._logger.info(
            "tenant_registry_evicted",
            registry_tenant=tenant_id,
            **self._get_context_kwargs(),
        )
