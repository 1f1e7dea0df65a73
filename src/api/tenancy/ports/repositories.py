"""Repository protocols (ports) for the tenancy bounded context.

The tenant directory is the central store of tenant records. The registry
reads through it on lookup misses; registration and deactivation write
through it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain import Tenant


@runtime_checkable
class ITenantDirectory(Protocol):
    """Central store of tenant records."""

    async def find_by_identifier(self, identifier: str) -> Tenant | None:
        """Retrieve a tenant by its public identifier.

        Args:
            identifier: Normalized tenant identifier

        Returns:
            The Tenant, or None if no tenant has this identifier
        """
        ...

    async def register(self, tenant: Tenant) -> Tenant:
        """Insert a newly created tenant.

        Args:
            tenant: The Tenant to persist

        Returns:
            The persisted Tenant

        Raises:
            DuplicateTenantIdentifierError: If the identifier is taken
        """
        ...

    async def save(self, tenant: Tenant) -> None:
        """Persist changes (status, plan) of an existing tenant.

        Raises:
            UnknownTenantError: If the tenant is not in the directory
        """
        ...

    async def list_all(self) -> list[Tenant]:
        """List every tenant in the directory."""
        ...
