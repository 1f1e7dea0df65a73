"""Domain probe for tenant resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of resolving a request to a tenant from the
X-Tenant-ID header, the tenant query parameter, or a bearer credential.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantResolutionProbe(Protocol):
    """Domain probe for tenant resolution operations."""

    def tenant_resolved(self, tenant_id: str, source: str) -> None:
        """Record that a request was bound to a tenant."""
        ...

    def request_unscoped(self) -> None:
        """Record that no strategy produced a tenant candidate."""
        ...

    def unknown_tenant(self, raw_value: str, source: str) -> None:
        """Record that a candidate identifier named no registered tenant."""
        ...

    def invalid_credential(self, reason: str) -> None:
        """Record that the bearer credential failed verification."""
        ...

    def tenant_suspended(self, tenant_id: str, status: str) -> None:
        """Record that the resolved tenant is not active."""
        ...

    def trial_expired(self, tenant_id: str, days_expired: int) -> None:
        """Record that the resolved tenant's trial has ended."""
        ...

    def tenant_changed(self, tenant_id: str) -> None:
        """Record that the tenant was evicted while its request was resolving."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolutionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolutionProbe:
    """Default implementation of TenantResolutionProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultTenantResolutionProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolutionProbe(logger=self._logger, context=context)

    def tenant_resolved(self, tenant_id: str, source: str) -> None:
        """Record that a request was bound to a tenant."""
        self._logger.debug(
            "tenant_resolved",
            resolved_tenant=tenant_id,
            source=source,
            **self._get_context_kwargs(),
        )

    def request_unscoped(self) -> None:
        """Record that no strategy produced a tenant candidate."""
        self._logger.debug(
            "tenant_request_unscoped",
            **self._get_context_kwargs(),
        )

    def unknown_tenant(self, raw_value: str, source: str) -> None:
        """Record that a candidate identifier named no registered tenant."""
        self._logger.warning(
            "tenant_unknown",
            raw_value=raw_value,
            source=source,
            **self._get_context_kwargs(),
        )

    def invalid_credential(self, reason: str) -> None:
        """Record that the bearer credential failed verification."""
        self._logger.warning(
            "tenant_credential_invalid",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def tenant_suspended(self, tenant_id: str, status: str) -> None:
        """Record that the resolved tenant is not active."""
        self._logger.warning(
            "tenant_suspended",
            resolved_tenant=tenant_id,
            status=status,
            **self._get_context_kwargs(),
        )

    def trial_expired(self, tenant_id: str, days_expired: int) -> None:
        """Record that the resolved tenant's trial has ended."""
        self._logger.warning(
            "tenant_trial_expired",
            resolved_tenant=tenant_id,
            days_expired=days_expired,
            **self._get_context_kwargs(),
        )

    def tenant_changed(self, tenant_id: str) -> None:
        """Record that the tenant was evicted while its request was resolving."""
        self._logger.info(
            "tenant_changed_during_resolution",
            resolved_tenant=tenant_id,
            **self._get_context_kwargs(),
        )
