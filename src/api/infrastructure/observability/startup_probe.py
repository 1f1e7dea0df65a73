"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, app_name: str, version: str) -> None:
        """Record that tenancy components were wired and the app is serving."""
        ...

    def jwt_secret_missing(self) -> None:
        """Record that no JWT secret is configured (every bearer token will fail)."""
        ...

    def application_stopped(self, closed_stores: int) -> None:
        """Record that shutdown released the tenant stores and directory pool."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_started(self, app_name: str, version: str) -> None:
        """Record that tenancy components were wired and the app is serving."""
        self._logger.info(
            "application_started",
            app_name=app_name,
            version=version,
            **self._get_context_kwargs(),
        )

    def jwt_secret_missing(self) -> None:
        """Record that no JWT secret is configured (every bearer token will fail)."""
        self._logger.warning(
            "jwt_secret_missing",
            message="TENANCY_AUTH_JWT_SECRET is empty; bearer credentials "
            "will be rejected",
            **self._get_context_kwargs(),
        )

    def application_stopped(self, closed_stores: int) -> None:
        """Record that shutdown released the tenant stores and directory pool."""
        self._logger.info(
            "application_stopped",
            closed_stores=closed_stores,
            **self._get_context_kwargs(),
        )
